"""
Species Catalog Backend — Comment Service and Listing Tests
===========================================================

What we test:
    ✅ Empty / whitespace-only comment rejected before any query
    ✅ Content is stored trimmed
    ✅ Commenting on a missing species → NotFoundError
    ✅ Comments grouped per species, newest first, names resolved
    ✅ "Unknown" fallbacks for missing profiles and NULL content
    ✅ Listing: species newest first, viewer name, "No name" fallback
"""

import uuid

import pytest

from app.auth import Session
from app.exceptions import NotFoundError, ValidationError
from app.models.comment import Comment
from app.models.species import Species
from app.schemas.comment import CommentCreate
from app.services.comment_service import CommentService
from app.services.listing_service import ListingService


async def _add_species(db, author, name="Panthera leo") -> Species:
    species = Species(scientific_name=name, kingdom="Animalia", author=author)
    db.add(species)
    await db.flush()
    return species


class TestAddComment:

    def setup_method(self):
        self.service = CommentService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   ", "\n\t", None])
    async def test_empty_comment_rejected(self, mock_db_session, author_id, content):
        with pytest.raises(ValidationError, match="Cannot post an empty comment."):
            await self.service.add_comment(mock_db_session, 1, author_id, CommentCreate(content=content))

        mock_db_session.execute.assert_not_awaited()
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_content_trimmed(self, db_session, author_id, other_user_id):
        species = await _add_species(db_session, author_id)

        result = await self.service.add_comment(
            db_session, species.id, other_user_id, CommentCreate(content="  Great find!  ")
        )

        assert result.content == "Great find!"
        assert result.species_id == species.id
        assert result.author_id == other_user_id

    @pytest.mark.asyncio
    async def test_missing_species(self, db_session, author_id):
        with pytest.raises(NotFoundError):
            await self.service.add_comment(db_session, 999, author_id, CommentCreate(content="Hello"))


class TestListComments:

    def setup_method(self):
        self.service = CommentService()

    @pytest.mark.asyncio
    async def test_grouped_newest_first(self, db_session, author_id, other_user_id):
        lion = await _add_species(db_session, author_id)
        oak = await _add_species(db_session, author_id, name="Quercus robur")
        for content in ("first", "second", "third"):
            await self.service.add_comment(db_session, lion.id, other_user_id, CommentCreate(content=content))
        db_session.expunge_all()

        grouped = await self.service.list_comments(db_session, [lion.id, oak.id])

        assert [c.content for c in grouped[lion.id]] == ["third", "second", "first"]
        assert {c.author for c in grouped[lion.id]} == {"Otto Other"}
        assert grouped[oak.id] == []

    @pytest.mark.asyncio
    async def test_unknown_fallbacks(self, db_session, author_id):
        lion = await _add_species(db_session, author_id)
        db_session.add(Comment(species_id=lion.id, author_id=uuid.uuid4(), content=None))
        await db_session.flush()
        db_session.expunge_all()

        [view] = (await self.service.list_comments(db_session, [lion.id]))[lion.id]

        assert view.author == "Unknown"
        assert view.content == "Unknown"

    @pytest.mark.asyncio
    async def test_no_ids_no_query(self, mock_db_session):
        assert await self.service.list_comments(mock_db_session, []) == {}
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_for_missing_species(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.list_for_species(db_session, 12345)


class TestBuildListing:

    def setup_method(self):
        self.service = ListingService()

    @pytest.mark.asyncio
    async def test_listing_composition(self, db_session, author_id, other_user_id):
        lion = await _add_species(db_session, author_id)
        orphan = await _add_species(db_session, uuid.uuid4(), name="Amanita muscaria")
        db_session.add(Comment(species_id=lion.id, author_id=other_user_id, content="Majestic"))
        await db_session.flush()
        db_session.expunge_all()

        listing = await self.service.build_listing(db_session, Session(user_id=other_user_id))

        assert listing.session_user_id == other_user_id
        assert listing.viewer_display_name == "Otto Other"
        assert [card.species.id for card in listing.species] == [orphan.id, lion.id]

        orphan_card, lion_card = listing.species
        assert orphan_card.author_name == "Unknown"
        assert orphan_card.comments == []
        assert lion_card.author_name == "Ada Author"
        assert [(c.author, c.content) for c in lion_card.comments] == [("Otto Other", "Majestic")]

    @pytest.mark.asyncio
    async def test_viewer_without_profile(self, db_session):
        listing = await self.service.build_listing(db_session, Session(user_id=uuid.uuid4()))

        assert listing.viewer_display_name == "No name"
        assert listing.species == []
