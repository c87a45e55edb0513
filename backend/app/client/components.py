"""
Species Catalog — Component View-Models
=======================================

What:  UI state and event handlers for the listing page and its dialogs.
How:   Plain classes. State lives in attributes (`is_open`, `content`,
       `values`, `submitting`); handlers are coroutines that make at most
       one CatalogClient call, then update state and post a toast.

Handler contract (every mutation):
    1. Local validation first; a rejection posts a destructive toast and
       makes no call.
    2. One awaited backend call.
    3. On BackendError: destructive toast "Something went wrong." with the
       backend's message; no other state changes.
    4. On success: close/reset as the component requires, post the success
       toast, then await the page's refresh. A failed refresh adds its own
       toast after it; SignInRequiredError from the refresh reaches the caller.

Components are rebuilt from scratch on every refresh, except that a card's
detail dialog stays open across a refresh (cards are keyed by species id).
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError as SchemaValidationError

from app.client.api_client import BackendError, CatalogClient, SignInRequiredError
from app.client.notifications import DESTRUCTIVE, Notifier
from app.schemas.comment import EMPTY_COMMENT_MESSAGE
from app.schemas.common import normalize_optional_text
from app.schemas.species import (
    EMPTY_SCIENTIFIC_NAME_MESSAGE,
    CommentView,
    Kingdom,
    SpeciesCardView,
    SpeciesCreate,
    SpeciesListing,
    SpeciesResponse,
    SpeciesUpdate,
)

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None]]

FAILURE_TITLE = "Something went wrong."
DESCRIPTION_PREVIEW_LENGTH = 150

SPECIES_FIELDS = (
    "scientific_name",
    "common_name",
    "kingdom",
    "total_population",
    "endangered",
    "description",
    "image",
)


def _report_failure(notifier: Notifier, exc: BackendError) -> None:
    notifier.toast(FAILURE_TITLE, description=exc.message, variant=DESTRUCTIVE)


def _first_schema_error(exc: SchemaValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Please check the form."
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "")


# ══════════════════════════════════════════════════════════════════════════
# Comments
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class CommentItem:
    """Display-only: one comment's author and text."""

    author: str
    content: str

    @classmethod
    def from_view(cls, view: CommentView) -> "CommentItem":
        return cls(author=view.author, content=view.content)


class AddCommentForm:
    """
    The comment box under a species' detail view.

    `content` is the raw textarea value. Submission trims it; an empty or
    whitespace-only value is rejected locally with no backend call.
    """

    def __init__(
        self,
        client: CatalogClient,
        notifier: Notifier,
        species_id: int,
        username: str,
        on_refresh: Callback,
    ):
        self.client = client
        self.notifier = notifier
        self.species_id = species_id
        self.username = username
        self.on_refresh = on_refresh
        self.content = ""
        self.submitting = False

    def set_content(self, text: Optional[str]) -> None:
        self.content = text or ""

    def reset(self) -> None:
        self.content = ""

    async def submit(self) -> bool:
        """Post the comment. Returns True when it was persisted."""
        if self.submitting:
            return False

        content = normalize_optional_text(self.content)
        if content is None:
            self.notifier.toast(EMPTY_COMMENT_MESSAGE, variant=DESTRUCTIVE)
            return False

        self.submitting = True
        try:
            await self.client.insert_comment(self.species_id, content)
        except BackendError as exc:
            _report_failure(self.notifier, exc)
            return False
        finally:
            self.submitting = False

        self.reset()
        self.notifier.toast("Comment posted!")
        await self.on_refresh()
        return True


# ══════════════════════════════════════════════════════════════════════════
# Species dialogs
# ══════════════════════════════════════════════════════════════════════════


class DeleteSpeciesDialog:
    """
    Confirmation modal in front of a species delete.

    Two affirmative actions are needed: open() (the "Delete" button) and
    confirm() (the "Delete Species" button inside the modal). cancel()
    closes the modal without a call; confirm() on a closed modal does nothing.
    """

    def __init__(
        self,
        client: CatalogClient,
        notifier: Notifier,
        species: SpeciesResponse,
        on_refresh: Callback,
    ):
        self.client = client
        self.notifier = notifier
        self.species = species
        self.on_refresh = on_refresh
        self.is_open = False
        self.submitting = False

    def open(self) -> None:
        self.is_open = True

    def cancel(self) -> None:
        self.is_open = False

    async def confirm(self) -> bool:
        if not self.is_open or self.submitting:
            return False

        self.submitting = True
        try:
            await self.client.delete_species(self.species.id)
        except BackendError as exc:
            # Modal stays open so the user can retry or cancel
            _report_failure(self.notifier, exc)
            return False
        finally:
            self.submitting = False

        self.is_open = False
        self.notifier.toast(
            "Species deleted!",
            description=f"Successfully deleted {self.species.scientific_name}.",
        )
        await self.on_refresh()
        return True


class _SpeciesFormDialog(ABC):
    """Shared state and validation for the add and edit species dialogs."""

    def __init__(self, client: CatalogClient, notifier: Notifier, on_refresh: Callback):
        self.client = client
        self.notifier = notifier
        self.on_refresh = on_refresh
        self.is_open = False
        self.submitting = False
        self.values: Dict[str, Any] = self._initial_values()

    @abstractmethod
    def _initial_values(self) -> Dict[str, Any]:
        """Form values the dialog opens with and resets to."""

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def reset(self) -> None:
        self.values = self._initial_values()

    def set(self, field: str, value: Any) -> None:
        if field not in SPECIES_FIELDS:
            raise KeyError(f"Unknown species field: {field}")
        self.values[field] = value

    def _validated_values(self) -> Optional[Dict[str, Any]]:
        """Local checks; posts a toast and returns None on rejection."""
        scientific_name = (self.values.get("scientific_name") or "").strip()
        if not scientific_name:
            self.notifier.toast(EMPTY_SCIENTIFIC_NAME_MESSAGE, variant=DESTRUCTIVE)
            return None
        return dict(self.values, scientific_name=scientific_name)


class AddSpeciesDialog(_SpeciesFormDialog):
    """Creates a species authored by the signed-in user."""

    def _initial_values(self) -> Dict[str, Any]:
        return {
            "scientific_name": "",
            "common_name": None,
            "kingdom": Kingdom.ANIMALIA,
            "total_population": None,
            "endangered": False,
            "description": None,
            "image": None,
        }

    async def submit(self) -> bool:
        if self.submitting:
            return False
        values = self._validated_values()
        if values is None:
            return False
        try:
            payload = SpeciesCreate(**values)
        except SchemaValidationError as exc:
            self.notifier.toast("Please check the form.", description=_first_schema_error(exc), variant=DESTRUCTIVE)
            return False

        self.submitting = True
        try:
            await self.client.create_species(payload)
        except BackendError as exc:
            _report_failure(self.notifier, exc)
            return False
        finally:
            self.submitting = False

        self.reset()
        self.close()
        self.notifier.toast("New species added!", description=f"Successfully added {payload.scientific_name}.")
        await self.on_refresh()
        return True


class EditSpeciesDialog(_SpeciesFormDialog):
    """Edits a species. Only ever built for the species' author."""

    def __init__(
        self,
        client: CatalogClient,
        notifier: Notifier,
        species: SpeciesResponse,
        on_refresh: Callback,
        on_edit: Optional[Callable[[], None]] = None,
    ):
        self.species = species
        self.on_edit = on_edit
        super().__init__(client, notifier, on_refresh)

    def _initial_values(self) -> Dict[str, Any]:
        return {name: getattr(self.species, name) for name in SPECIES_FIELDS}

    async def submit(self) -> bool:
        if self.submitting:
            return False
        values = self._validated_values()
        if values is None:
            return False
        try:
            payload = SpeciesUpdate(**values)
        except SchemaValidationError as exc:
            self.notifier.toast("Please check the form.", description=_first_schema_error(exc), variant=DESTRUCTIVE)
            return False

        self.submitting = True
        try:
            await self.client.update_species(self.species.id, payload)
        except BackendError as exc:
            _report_failure(self.notifier, exc)
            return False
        finally:
            self.submitting = False

        self.close()
        if self.on_edit is not None:
            self.on_edit()
        self.notifier.toast("Changes saved!", description=f"Saved changes to {payload.scientific_name}.")
        await self.on_refresh()
        return True


# ══════════════════════════════════════════════════════════════════════════
# Card and page
# ══════════════════════════════════════════════════════════════════════════


class SpeciesCard:
    """
    One species in the listing: summary, "Learn More" detail dialog,
    comment section, and (for the author only) edit/delete controls.
    """

    def __init__(
        self,
        view: SpeciesCardView,
        session_user_id: uuid.UUID,
        viewer_display_name: str,
        client: CatalogClient,
        notifier: Notifier,
        on_refresh: Callback,
    ):
        self.species = view.species
        self.author_name = view.author_name
        self.comments: List[CommentItem] = [CommentItem.from_view(c) for c in view.comments]
        self.is_open = False
        self.is_author = session_user_id == view.species.author

        self.add_comment_form = AddCommentForm(
            client, notifier, self.species.id, viewer_display_name, on_refresh
        )
        self.edit_dialog: Optional[EditSpeciesDialog] = None
        self.delete_dialog: Optional[DeleteSpeciesDialog] = None
        if self.is_author:
            self.edit_dialog = EditSpeciesDialog(
                client, notifier, self.species, on_refresh, on_edit=self.close
            )
            self.delete_dialog = DeleteSpeciesDialog(client, notifier, self.species, on_refresh)

    @property
    def key(self) -> int:
        return self.species.id

    @property
    def description_preview(self) -> str:
        description = self.species.description
        if not description:
            return ""
        return description[:DESCRIPTION_PREVIEW_LENGTH].strip() + "..."

    @property
    def endangered_label(self) -> str:
        return "Yes" if self.species.endangered else "No"

    def open(self) -> None:
        """The "Learn More" button."""
        self.is_open = True

    def close(self) -> None:
        self.is_open = False


class SpeciesListPage:
    """
    The protected listing page.

    load() and refresh() raise SignInRequiredError when the backend
    redirects (the caller should navigate to `exc.location`). refresh() is
    what child components call after a successful mutation; any other
    failed refresh is reported as a toast and leaves the current cards in place.
    """

    def __init__(self, client: CatalogClient, notifier: Notifier):
        self.client = client
        self.notifier = notifier
        self.listing: Optional[SpeciesListing] = None
        self.cards: List[SpeciesCard] = []
        self.add_species_dialog = AddSpeciesDialog(client, notifier, self.refresh)

    @property
    def viewer_display_name(self) -> str:
        return self.listing.viewer_display_name if self.listing else ""

    async def load(self) -> None:
        listing = await self.client.fetch_listing()
        self._render(listing)

    async def refresh(self) -> None:
        try:
            await self.load()
        except SignInRequiredError:
            raise
        except BackendError as exc:
            logger.warning("Refresh failed: %s", exc.message)
            _report_failure(self.notifier, exc)

    def card(self, species_id: int) -> Optional[SpeciesCard]:
        for card in self.cards:
            if card.key == species_id:
                return card
        return None

    def _render(self, listing: SpeciesListing) -> None:
        open_keys = {card.key for card in self.cards if card.is_open}
        cards = []
        for view in listing.species:
            card = SpeciesCard(
                view,
                session_user_id=listing.session_user_id,
                viewer_display_name=listing.viewer_display_name,
                client=self.client,
                notifier=self.notifier,
                on_refresh=self.refresh,
            )
            if card.key in open_keys:
                card.is_open = True
            cards.append(card)
        self.listing = listing
        self.cards = cards
