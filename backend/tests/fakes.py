"""In-memory Trello used by the tests."""

import json
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs

import httpx

APP_KEY = "test-app-key-123456"
USER_TOKEN = "test-user-token-abcdef"


@dataclass
class FakeBoard:
    full_id: str
    lists: list[dict[str, Any]] = field(default_factory=list)
    labels: list[dict[str, Any]] = field(default_factory=list)


class FakeTrello:
    """Minimal Trello REST emulation that records every call."""

    def __init__(self) -> None:
        self.boards: dict[str, FakeBoard] = {}
        self.cards: dict[str, dict[str, Any]] = {}
        self.attachments: list[tuple[str, str, bytes]] = []
        self.calls: list[tuple[str, str]] = []
        self.auth_headers: list[str | None] = []
        self.urls: list[str] = []
        # (method, path) -> status code to return instead of the normal response
        self.fail: dict[tuple[str, str], int] = {}
        # (method, path) -> raise a timeout
        self.timeouts: set[tuple[str, str]] = set()
        # attachment file names whose upload is rejected
        self.fail_attachments: set[str] = set()
        # label names whose creation is rejected
        self.fail_label_names: set[str] = set()
        self._next_id = 0

    def _new_id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    def add_board(
        self,
        board_id: str,
        *,
        lists: tuple[str, ...] = ("To Do", "Incoming"),
        labels: tuple[str, ...] | list[str] = (),
    ) -> FakeBoard:
        board = FakeBoard(full_id=f"full-{board_id}")
        for name in lists:
            list_id = f"list-{board_id}-{name.lower().replace(' ', '-')}"
            board.lists.append({"id": list_id, "name": name})
        for name in labels:
            board.labels.append({"id": self._new_id("label"), "name": name, "color": "blue"})
        self.boards[board_id] = board
        return board

    def label_names(self, board_id: str) -> list[str]:
        return [label["name"] for label in self.boards[board_id].labels]

    def count(self, method: str, prefix: str) -> int:
        return sum(1 for m, p in self.calls if m == method and p.startswith(prefix))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # ------------------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path.removeprefix("/1/")
        self.calls.append((method, path))
        self.auth_headers.append(request.headers.get("Authorization"))
        self.urls.append(str(request.url))

        if (method, path) in self.timeouts:
            raise httpx.ReadTimeout("timed out", request=request)
        if (method, path) in self.fail:
            return httpx.Response(self.fail[(method, path)], text="<p>upstream said no</p>")

        parts = path.split("/")
        if parts[0] == "boards":
            return self._boards(method, parts)
        if parts[0] == "labels":
            return self._labels(method, parts, request)
        if parts[0] == "cards":
            return self._cards(method, parts, request)
        return httpx.Response(404, text="not found")

    def _boards(self, method: str, parts: list[str]) -> httpx.Response:
        board = self.boards.get(parts[1]) if len(parts) > 1 else None
        if method != "GET" or board is None:
            return httpx.Response(404, text="board not found")
        if len(parts) == 2:
            return httpx.Response(200, json={"id": board.full_id})
        if parts[2] == "lists":
            return httpx.Response(200, json=board.lists)
        if parts[2] == "labels":
            return httpx.Response(200, json=board.labels)
        return httpx.Response(404, text="not found")

    def _labels(self, method: str, parts: list[str], request: httpx.Request) -> httpx.Response:
        if method == "POST" and len(parts) == 1:
            params = parse_qs(request.url.query.decode())
            board = next(
                (b for b in self.boards.values() if b.full_id == params["idBoard"][0]), None
            )
            if board is None:
                return httpx.Response(400, text="invalid idBoard")
            if params["name"][0] in self.fail_label_names:
                return httpx.Response(400, text="invalid label")
            label = {
                "id": self._new_id("label"),
                "name": params["name"][0],
                "color": params["color"][0],
            }
            board.labels.append(label)
            return httpx.Response(200, json=label)
        if method == "DELETE" and len(parts) == 2:
            for board in self.boards.values():
                for label in board.labels:
                    if label["id"] == parts[1]:
                        board.labels.remove(label)
                        return httpx.Response(200, json={})
            return httpx.Response(404, text="label not found")
        return httpx.Response(404, text="not found")

    def _cards(self, method: str, parts: list[str], request: httpx.Request) -> httpx.Response:
        if method == "POST" and len(parts) == 1:
            body = json.loads(request.content)
            card_id = self._new_id("card")
            self.cards[card_id] = body
            return httpx.Response(200, json={"id": card_id, **body})
        if method == "POST" and len(parts) == 3 and parts[2] == "attachments":
            content = request.content
            marker = b'filename="'
            start = content.index(marker) + len(marker)
            filename = content[start : content.index(b'"', start)].decode()
            if filename in self.fail_attachments:
                return httpx.Response(413, text="file too large")
            self.attachments.append((parts[1], filename, content))
            return httpx.Response(200, json={"id": self._new_id("attachment"), "name": filename})
        return httpx.Response(404, text="not found")
