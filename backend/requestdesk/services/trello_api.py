"""Trello API client service.

Credentials are sent in the ``Authorization`` header (Trello's OAuth header
form) so the app key and user token never appear in request URLs or logs.
Every non-2xx response and every transport failure raises ``TrelloAPIError``.
"""

import logging
import re
from typing import Any

import httpx

from requestdesk.core.exceptions import TrelloAPIError

logger = logging.getLogger(__name__)

TRELLO_BASE = "https://api.trello.com/1"

_MAX_ERROR_LEN = 300


def _sanitize_error(body: str) -> str:
    """Strip markup and truncate an error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > _MAX_ERROR_LEN:
        return cleaned[:_MAX_ERROR_LEN] + "... [truncated]"
    return cleaned


class TrelloAPIClient:
    """Client for the Trello REST API.

    Manages a shared httpx client for connection reuse. Pass *transport* to
    route requests somewhere other than the network (tests use
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        app_key: str,
        user_token: str,
        *,
        timeout: float = 10.0,
        base_url: str = TRELLO_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not app_key or not user_token:
            raise ValueError("Trello app key and user token are required")

        self._auth_header = f'OAuth oauth_consumer_key="{app_key}", oauth_token="{user_token}"'
        self.base_url = base_url.rstrip("/")

        # Shared HTTP client
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the shared HTTP client. Call on app shutdown."""
        await self._http.aclose()

    def __repr__(self) -> str:
        return f"TrelloAPIClient(base_url={self.base_url!r})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request and return the response, raising on failure."""
        headers = {"Authorization": self._auth_header, "Accept": "application/json"}
        try:
            response = await self._http.request(
                method, f"{self.base_url}/{path}", headers=headers, **kwargs
            )
        except httpx.TimeoutException:
            logger.error(f"Trello {method} /{path} timed out")
            raise TrelloAPIError(None, "request timed out") from None
        except httpx.HTTPError as e:
            logger.error(f"Trello {method} /{path} failed: {type(e).__name__}")
            raise TrelloAPIError(None, f"request failed: {type(e).__name__}") from None

        if response.is_success:
            return response

        message = _sanitize_error(response.text) or response.reason_phrase
        logger.debug(f"Trello {method} /{path} -> {response.status_code}: {message}")
        raise TrelloAPIError(response.status_code, message)

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError:
            raise TrelloAPIError(response.status_code, "response was not valid JSON") from None

    async def _json_list(self, path: str) -> list[dict[str, Any]]:
        data = await self._json("GET", path)
        if not isinstance(data, list):
            raise TrelloAPIError(None, f"expected a list from /{path}")
        return [item for item in data if isinstance(item, dict)]

    async def _json_object(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        data = await self._json(method, path, **kwargs)
        if not isinstance(data, dict):
            raise TrelloAPIError(None, f"expected an object from /{path}")
        return data

    # ------------------------------------------------------------------
    # Boards (read)
    # ------------------------------------------------------------------

    async def get_board(self, board_id: str) -> dict[str, Any]:
        """Fetch a board by short or full id."""
        return await self._json_object("GET", f"boards/{board_id}")

    async def get_board_lists(self, board_id: str) -> list[dict[str, Any]]:
        """All lists on a board."""
        return await self._json_list(f"boards/{board_id}/lists")

    async def get_board_labels(self, board_id: str) -> list[dict[str, Any]]:
        """All labels on a board."""
        return await self._json_list(f"boards/{board_id}/labels")

    # ------------------------------------------------------------------
    # Labels (write)
    # ------------------------------------------------------------------

    async def create_label(self, board_full_id: str, name: str, color: str) -> dict[str, Any]:
        """Create a label on a board. Needs the board's full id."""
        return await self._json_object(
            "POST",
            "labels",
            params={"name": name, "color": color, "idBoard": board_full_id},
        )

    async def delete_label(self, label_id: str) -> None:
        await self._request("DELETE", f"labels/{label_id}")

    # ------------------------------------------------------------------
    # Cards (write)
    # ------------------------------------------------------------------

    async def create_card(
        self,
        *,
        list_id: str,
        name: str,
        description: str,
        label_ids: list[str],
        start: str,
        position: str = "top",
    ) -> dict[str, Any]:
        """Create a card and return the created card object."""
        card = await self._json_object(
            "POST",
            "cards",
            json={
                "idList": list_id,
                "name": name,
                "desc": description,
                "pos": position,
                "start": start,
                "idLabels": label_ids,
            },
        )
        if not card.get("id"):
            raise TrelloAPIError(None, "created card has no id")
        return card

    async def create_card_attachment(
        self, card_id: str, filename: str, content: bytes
    ) -> dict[str, Any]:
        """Upload a file to a card as a multipart attachment."""
        return await self._json_object(
            "POST",
            f"cards/{card_id}/attachments",
            files={"file": (filename, content)},
        )
