"""
Species Catalog — Client Component Tests
========================================

How:   CatalogClient replaced by an AsyncMock; a real Notifier collects toasts.

What we test:
    ✅ AddCommentForm: local empty check, trimmed insert, reset + refresh + toast
    ✅ DeleteSpeciesDialog: two confirmations, cancel, failure keeps it open
    ✅ Add/Edit species dialogs: success and failure toasts
    ✅ SpeciesCard: author-only controls, description preview
    ✅ SpeciesListPage: load, open cards survive refresh, failed refresh toasts
    ✅ An expired session during a refresh reaches the caller as SignInRequiredError
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.client.api_client import BackendError, SignInRequiredError
from app.client.components import (
    AddCommentForm,
    AddSpeciesDialog,
    DeleteSpeciesDialog,
    EditSpeciesDialog,
    SpeciesCard,
    SpeciesListPage,
    _SpeciesFormDialog,
)
from app.client.notifications import DESTRUCTIVE, Notifier
from app.schemas.species import (
    CommentView,
    SpeciesCardView,
    SpeciesListing,
    SpeciesResponse,
)

AUTHOR = uuid.UUID("11111111-1111-4111-8111-111111111111")
VIEWER = uuid.UUID("22222222-2222-4222-8222-222222222222")


def _species(species_id=1, author=AUTHOR, **overrides) -> SpeciesResponse:
    fields = {
        "id": species_id,
        "scientific_name": "Panthera leo",
        "common_name": "Lion",
        "kingdom": "Animalia",
        "total_population": 23000,
        "endangered": True,
        "description": "Large social cat of the African savanna.",
        "image": None,
        "author": author,
    }
    fields.update(overrides)
    return SpeciesResponse(**fields)


def _listing(*species, viewer=VIEWER) -> SpeciesListing:
    return SpeciesListing(
        session_user_id=viewer,
        viewer_display_name="Otto Other",
        species=[
            SpeciesCardView(
                species=s,
                author_name="Ada Author",
                comments=[CommentView(id=1, author="Otto Other", content="Majestic")],
            )
            for s in species
        ],
    )


@pytest.fixture
def client():
    mock = MagicMock()
    mock.insert_comment = AsyncMock()
    mock.create_species = AsyncMock()
    mock.update_species = AsyncMock()
    mock.delete_species = AsyncMock()
    mock.fetch_listing = AsyncMock()
    return mock


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def refresh():
    return AsyncMock()


class TestAddCommentForm:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    async def test_empty_rejected_locally(self, client, notifier, refresh, text):
        form = AddCommentForm(client, notifier, 7, "Otto Other", refresh)
        form.set_content(text)

        assert await form.submit() is False

        client.insert_comment.assert_not_awaited()
        refresh.assert_not_awaited()
        assert notifier.last.title == "Cannot post an empty comment."
        assert notifier.last.variant == DESTRUCTIVE

    @pytest.mark.asyncio
    async def test_success(self, client, notifier, refresh):
        form = AddCommentForm(client, notifier, 7, "Otto Other", refresh)
        form.set_content("  Great find!  ")

        assert await form.submit() is True

        client.insert_comment.assert_awaited_once_with(7, "Great find!")
        refresh.assert_awaited_once()
        assert form.content == ""
        assert notifier.last.title == "Comment posted!"

    @pytest.mark.asyncio
    async def test_backend_failure_keeps_content(self, client, notifier, refresh):
        client.insert_comment.side_effect = BackendError("species with ID '7' was not found", status_code=404)
        form = AddCommentForm(client, notifier, 7, "Otto Other", refresh)
        form.set_content("Hello")

        assert await form.submit() is False

        assert form.content == "Hello"
        assert form.submitting is False
        refresh.assert_not_awaited()
        assert notifier.last.title == "Something went wrong."
        assert notifier.last.description == "species with ID '7' was not found"
        assert notifier.last.variant == DESTRUCTIVE


class TestDeleteSpeciesDialog:

    @pytest.mark.asyncio
    async def test_needs_open_before_confirm(self, client, notifier, refresh):
        dialog = DeleteSpeciesDialog(client, notifier, _species(), refresh)

        assert await dialog.confirm() is False
        client.delete_species.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancel(self, client, notifier, refresh):
        dialog = DeleteSpeciesDialog(client, notifier, _species(), refresh)
        dialog.open()
        dialog.cancel()

        assert await dialog.confirm() is False
        client.delete_species.assert_not_awaited()
        assert notifier.toasts == []

    @pytest.mark.asyncio
    async def test_confirmed_delete(self, client, notifier, refresh):
        dialog = DeleteSpeciesDialog(client, notifier, _species(species_id=3), refresh)
        dialog.open()

        assert await dialog.confirm() is True

        client.delete_species.assert_awaited_once_with(3)
        refresh.assert_awaited_once()
        assert dialog.is_open is False
        assert notifier.last.title == "Species deleted!"
        assert notifier.last.description == "Successfully deleted Panthera leo."

    @pytest.mark.asyncio
    async def test_failure_stays_open(self, client, notifier, refresh):
        client.delete_species.side_effect = BackendError("Only the author of this species can change it.")
        dialog = DeleteSpeciesDialog(client, notifier, _species(), refresh)
        dialog.open()

        assert await dialog.confirm() is False

        assert dialog.is_open is True
        refresh.assert_not_awaited()
        assert notifier.last.description == "Only the author of this species can change it."


class TestSpeciesDialogs:

    @pytest.mark.asyncio
    async def test_add_blank_name(self, client, notifier, refresh):
        dialog = AddSpeciesDialog(client, notifier, refresh)
        dialog.open()
        dialog.set("scientific_name", "   ")

        assert await dialog.submit() is False

        client.create_species.assert_not_awaited()
        assert dialog.is_open is True
        assert notifier.last.title == "Scientific name cannot be empty."

    @pytest.mark.asyncio
    async def test_add_success(self, client, notifier, refresh):
        dialog = AddSpeciesDialog(client, notifier, refresh)
        dialog.open()
        dialog.set("scientific_name", " Quercus robur ")
        dialog.set("kingdom", "Plantae")

        assert await dialog.submit() is True

        payload = client.create_species.await_args.args[0]
        assert payload.scientific_name == "Quercus robur"
        assert dialog.is_open is False
        assert dialog.values["scientific_name"] == ""
        refresh.assert_awaited_once()
        assert notifier.last.title == "New species added!"

    @pytest.mark.asyncio
    async def test_add_invalid_population(self, client, notifier, refresh):
        dialog = AddSpeciesDialog(client, notifier, refresh)
        dialog.set("scientific_name", "Quercus robur")
        dialog.set("total_population", -5)

        assert await dialog.submit() is False

        client.create_species.assert_not_awaited()
        assert notifier.last.variant == DESTRUCTIVE

    @pytest.mark.asyncio
    async def test_add_invalid_image_url(self, client, notifier, refresh):
        dialog = AddSpeciesDialog(client, notifier, refresh)
        dialog.open()
        dialog.set("scientific_name", "Panthera leo")
        dialog.set("image", "definitely not a url")

        assert await dialog.submit() is False

        client.create_species.assert_not_awaited()
        assert dialog.is_open is True
        assert notifier.last.title == "Please check the form."
        assert notifier.last.description.startswith("image: ")

    @pytest.mark.asyncio
    async def test_add_sends_image_url(self, client, notifier, refresh):
        dialog = AddSpeciesDialog(client, notifier, refresh)
        dialog.set("scientific_name", "Panthera leo")
        dialog.set("image", "  https://example.org/lion.jpg  ")

        assert await dialog.submit() is True

        payload = client.create_species.await_args.args[0]
        assert payload.model_dump(mode="json")["image"] == "https://example.org/lion.jpg"

    def test_form_dialog_base_is_abstract(self, client, notifier, refresh):
        with pytest.raises(TypeError):
            _SpeciesFormDialog(client, notifier, refresh)

    def test_unknown_field(self, client, notifier, refresh):
        dialog = AddSpeciesDialog(client, notifier, refresh)
        with pytest.raises(KeyError):
            dialog.set("author", str(VIEWER))

    @pytest.mark.asyncio
    async def test_edit_success_closes_card(self, client, notifier, refresh):
        on_edit = MagicMock()
        dialog = EditSpeciesDialog(client, notifier, _species(species_id=4), refresh, on_edit=on_edit)
        dialog.open()
        dialog.set("common_name", "African lion")

        assert await dialog.submit() is True

        species_id, payload = client.update_species.await_args.args
        assert species_id == 4
        assert payload.common_name == "African lion"
        on_edit.assert_called_once()
        refresh.assert_awaited_once()
        assert notifier.last.title == "Changes saved!"

    @pytest.mark.asyncio
    async def test_edit_failure_keeps_state(self, client, notifier, refresh):
        client.update_species.side_effect = BackendError("A database error occurred. Please try again later.")
        on_edit = MagicMock()
        dialog = EditSpeciesDialog(client, notifier, _species(), refresh, on_edit=on_edit)
        dialog.open()
        dialog.set("common_name", "African lion")

        assert await dialog.submit() is False

        assert dialog.is_open is True
        assert dialog.values["common_name"] == "African lion"
        on_edit.assert_not_called()
        refresh.assert_not_awaited()
        assert notifier.last.title == "Something went wrong."


class TestSpeciesCard:

    def _card(self, client, notifier, refresh, viewer, **species_fields):
        view = _listing(_species(**species_fields)).species[0]
        return SpeciesCard(view, viewer, "Viewer", client, notifier, refresh)

    def test_author_gets_controls(self, client, notifier, refresh):
        card = self._card(client, notifier, refresh, AUTHOR)

        assert card.is_author is True
        assert card.edit_dialog is not None
        assert card.delete_dialog is not None

    def test_others_get_no_controls(self, client, notifier, refresh):
        card = self._card(client, notifier, refresh, VIEWER)

        assert card.is_author is False
        assert card.edit_dialog is None
        assert card.delete_dialog is None
        assert card.add_comment_form is not None

    def test_description_preview(self, client, notifier, refresh):
        long_text = "word " * 60
        card = self._card(client, notifier, refresh, VIEWER, description=long_text)

        assert card.description_preview == long_text[:150].strip() + "..."

    def test_no_description(self, client, notifier, refresh):
        card = self._card(client, notifier, refresh, VIEWER, description=None)

        assert card.description_preview == ""

    def test_comments_and_labels(self, client, notifier, refresh):
        card = self._card(client, notifier, refresh, VIEWER, endangered=False)

        assert [(c.author, c.content) for c in card.comments] == [("Otto Other", "Majestic")]
        assert card.endangered_label == "No"
        assert card.author_name == "Ada Author"


class TestSpeciesListPage:

    @pytest.mark.asyncio
    async def test_load_builds_cards(self, client, notifier):
        client.fetch_listing.return_value = _listing(_species(species_id=2), _species(species_id=1))
        page = SpeciesListPage(client, notifier)

        await page.load()

        assert [card.key for card in page.cards] == [2, 1]
        assert page.viewer_display_name == "Otto Other"

    @pytest.mark.asyncio
    async def test_open_card_survives_refresh(self, client, notifier):
        client.fetch_listing.return_value = _listing(_species(species_id=2), _species(species_id=1))
        page = SpeciesListPage(client, notifier)
        await page.load()
        page.card(1).open()

        await page.refresh()

        assert page.card(1).is_open is True
        assert page.card(2).is_open is False

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_cards(self, client, notifier):
        client.fetch_listing.return_value = _listing(_species(species_id=1))
        page = SpeciesListPage(client, notifier)
        await page.load()
        client.fetch_listing.side_effect = BackendError("Could not reach the server. Check your connection.")

        await page.refresh()

        assert [card.key for card in page.cards] == [1]
        assert notifier.last.variant == DESTRUCTIVE

    @pytest.mark.asyncio
    async def test_expired_session_after_comment_reaches_caller(self, client, notifier):
        client.fetch_listing.return_value = _listing(_species(species_id=1))
        page = SpeciesListPage(client, notifier)
        await page.load()
        client.fetch_listing.side_effect = SignInRequiredError(location="/", status_code=303)
        form = page.card(1).add_comment_form
        form.set_content("Still here?")

        with pytest.raises(SignInRequiredError) as exc_info:
            await form.submit()

        assert exc_info.value.location == "/"
        client.insert_comment.assert_awaited_once_with(1, "Still here?")
        assert [t.title for t in notifier.toasts] == ["Comment posted!"]

    @pytest.mark.asyncio
    async def test_failed_refresh_toast_follows_success_toast(self, client, notifier):
        client.fetch_listing.return_value = _listing(_species(species_id=1, author=VIEWER))
        page = SpeciesListPage(client, notifier)
        await page.load()
        client.fetch_listing.side_effect = BackendError("Could not reach the server. Check your connection.")
        dialog = page.card(1).delete_dialog
        dialog.open()

        assert await dialog.confirm() is True

        assert [(t.title, t.variant) for t in notifier.toasts] == [
            ("Species deleted!", "default"),
            ("Something went wrong.", DESTRUCTIVE),
        ]

    @pytest.mark.asyncio
    async def test_signed_out_propagates(self, client, notifier):
        client.fetch_listing.side_effect = SignInRequiredError(location="/", status_code=303)
        page = SpeciesListPage(client, notifier)

        with pytest.raises(SignInRequiredError) as exc_info:
            await page.load()
        assert exc_info.value.location == "/"
