"""
Species Catalog — Client Components
===================================

What:  The browser-side half of the application, as Python view-models.
How:   Each component holds its own UI state (open/closed flags, form
       fields), talks to the backend only through CatalogClient, and
       reports outcomes through a Notifier (toasts).

Component Inventory:
    - SpeciesListPage:      loads the listing, owns the cards, refresh()
    - SpeciesCard:          summary + detail dialog, author-only controls
    - CommentItem:          one comment's author and text
    - AddCommentForm:       trims/validates, posts, resets, refreshes
    - AddSpeciesDialog:     creates a species authored by the viewer
    - EditSpeciesDialog:    edits a species (author only)
    - DeleteSpeciesDialog:  two-step confirmation, then delete

Every user action issues at most one backend call and awaits it. A failed
call is reported once as a destructive toast and never retried.
"""

from app.client.api_client import BackendError, CatalogClient, SignInRequiredError
from app.client.components import (
    AddCommentForm,
    AddSpeciesDialog,
    CommentItem,
    DeleteSpeciesDialog,
    EditSpeciesDialog,
    SpeciesCard,
    SpeciesListPage,
)
from app.client.notifications import Notifier, Toast

__all__ = [
    "AddCommentForm",
    "AddSpeciesDialog",
    "BackendError",
    "CatalogClient",
    "CommentItem",
    "DeleteSpeciesDialog",
    "EditSpeciesDialog",
    "Notifier",
    "SignInRequiredError",
    "SpeciesCard",
    "SpeciesListPage",
    "Toast",
]
