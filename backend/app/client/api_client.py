"""
Species Catalog — Backend HTTP Client
=====================================

What:  Thin async wrapper over the backend's JSON API.
How:   One httpx.AsyncClient per signed-in user, carrying the session token
       as a bearer header. Responses are parsed into the backend's own
       Pydantic schemas, so client and server share one contract.

Failure contract:
    Every failure surfaces as BackendError whose `message` is what the
    user should read: the backend's ErrorResponse.message when there is
    one, otherwise a generic sentence. Redirects from the listing (the
    backend's "not signed in" answer for pages) raise SignInRequiredError.
    Nothing is retried.
"""

import logging
from typing import Any, Optional

import httpx

from app.schemas.comment import CommentCreate, CommentResponse
from app.schemas.species import (
    SpeciesCreate,
    SpeciesDeletedResponse,
    SpeciesListing,
    SpeciesResponse,
    SpeciesUpdate,
)

logger = logging.getLogger(__name__)

_REDIRECT_STATUSES = {301, 302, 303, 307, 308}


class BackendError(RuntimeError):
    """A backend call failed; `message` is safe to show to the user."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.request_id = request_id


class SignInRequiredError(BackendError):
    """The backend redirected us to the entry point: the session is gone."""

    def __init__(self, location: str, status_code: Optional[int] = None):
        super().__init__("Please sign in to continue.", status_code=status_code)
        self.location = location


def _error_message(response: httpx.Response) -> str:
    """Pull a user-facing sentence out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return f"Request failed with status {response.status_code}."

    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
        # FastAPI's own 422 body: {"detail": [{"msg": "...", ...}, ...]}
        detail = body.get("detail")
        if isinstance(detail, list) and detail and isinstance(detail[0], dict):
            msg = detail[0].get("msg")
            if isinstance(msg, str) and msg:
                return msg
        if isinstance(detail, str) and detail:
            return detail
    return f"Request failed with status {response.status_code}."


class CatalogClient:
    """
    Backend API for one signed-in user.

    Usage:
        async with CatalogClient("http://localhost:8000", access_token=token) as client:
            listing = await client.fetch_listing()
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        *,
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        base_url = (base_url or "").strip().rstrip("/")
        if not base_url:
            raise ValueError("base_url is empty.")
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout_s,
            transport=transport,
            follow_redirects=False,
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed before a response: %s", method, path, exc)
            raise BackendError("Could not reach the server. Check your connection.") from exc

        if response.status_code in _REDIRECT_STATUSES:
            raise SignInRequiredError(
                location=response.headers.get("Location", "/"),
                status_code=response.status_code,
            )

        if response.status_code >= 400:
            message = _error_message(response)
            request_id = response.headers.get("X-Request-ID")
            logger.warning(
                "%s %s → %d [%s]: %s", method, path, response.status_code, request_id, message
            )
            raise BackendError(message, status_code=response.status_code, request_id=request_id)

        return response.json()

    # ── Species ───────────────────────────────────────────────────────────

    async def fetch_listing(self) -> SpeciesListing:
        return SpeciesListing.model_validate(await self._request("GET", "/api/species"))

    async def create_species(self, data: SpeciesCreate) -> SpeciesResponse:
        body = data.model_dump(mode="json")
        return SpeciesResponse.model_validate(await self._request("POST", "/api/species", json=body))

    async def update_species(self, species_id: int, data: SpeciesUpdate) -> SpeciesResponse:
        body = data.model_dump(mode="json", exclude_unset=True)
        return SpeciesResponse.model_validate(
            await self._request("PATCH", f"/api/species/{species_id}", json=body)
        )

    async def delete_species(self, species_id: int) -> SpeciesDeletedResponse:
        return SpeciesDeletedResponse.model_validate(
            await self._request("DELETE", f"/api/species/{species_id}")
        )

    # ── Comments ──────────────────────────────────────────────────────────

    async def insert_comment(self, species_id: int, content: str) -> CommentResponse:
        body = CommentCreate(content=content).model_dump(mode="json")
        return CommentResponse.model_validate(
            await self._request("POST", f"/api/species/{species_id}/comments", json=body)
        )
