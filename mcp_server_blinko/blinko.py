"""
Blinko API client.

Wraps the Blinko REST endpoints used by the MCP tools. Each method issues
exactly one HTTP request with the API key as a Bearer token:

  POST /api/v1/note/list                  search notes
  GET  /api/v1/note/daily-review-list     today's notes for review
  POST /api/v1/note/clear-recycle-bin     empty the recycle bin
  POST /api/v1/note/upsert                create a note
  POST /api/trpc/notes.upsert?batch=1     update a note (single-item batch)
  POST /api/trpc/notes.deleteMany?batch=1 delete a note (single-item batch)
  POST /api/v1/note/share                 share / unshare a note

The REST surface only creates notes, so updates and deletes go through the
tRPC batch endpoints with a one-element batch.
"""

import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mcp_server_blinko.errors import (
    ArgumentError,
    BlinkoTransportError,
    ConfigurationError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

UPDATE_RPC_PATH = "/api/trpc/notes.upsert"
DELETE_RPC_PATH = "/api/trpc/notes.deleteMany"
BATCH_PARAMS = {"batch": "1"}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class _BlinkoModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Note(_BlinkoModel):
    id: int
    type: int = 0
    content: str | None = ""
    is_archived: bool = False
    is_recycle: bool = False
    is_share: bool = False
    is_top: bool = False
    is_reviewed: bool = False
    share_password: str | None = None
    share_encrypted_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ShareNoteResult(_BlinkoModel):
    id: int
    is_share: bool = False
    share_password: str | None = None
    share_encrypted_url: str | None = None


class SearchQuery(_BlinkoModel):
    """Body of POST /api/v1/note/list, with the server-side defaults applied."""

    search_text: str
    size: int = 5
    type: int = -1
    is_archived: bool = False
    is_recycle: bool = False
    is_use_ai_query: bool = True
    start_date: str | None = None
    end_date: str | None = None
    has_todo: bool = False


class NoteUpdate(_BlinkoModel):
    """Sparse update; only fields that were explicitly set are sent."""

    content: str | None = None
    type: int | None = Field(default=None, ge=0, le=2)
    is_archived: bool | None = None
    is_recycle: bool | None = None
    is_top: bool | None = None


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

def normalize_domain(domain: str) -> str:
    """Turn a bare host or a full URL into the API base URL.

    "example.com:3000"       -> "https://example.com:3000"
    "http://localhost:1111/" -> "http://localhost:1111"
    """
    if not domain:
        raise ConfigurationError("Domain cannot be empty")

    if domain.endswith("/"):
        domain = domain[:-1]

    if domain.startswith(("http://", "https://")):
        return domain
    return f"https://{domain}"


class BlinkoClient:
    """Client for one Blinko instance."""

    def __init__(
        self,
        domain: str,
        api_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = normalize_domain(domain)
        self.api_key = api_key
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: dict[str, str] | None = None,
        error_prefix: str = "request failed with status",
    ) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=None,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, json=json_body, params=params)
        except httpx.TransportError as e:
            raise BlinkoTransportError(str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning("%s %s -> %d", method, path, response.status_code)
            raise UpstreamError(response.status_code, response.text, prefix=error_prefix)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise UpstreamError(response.status_code, response.text) from e

    async def search_notes(self, query: SearchQuery) -> list[Note]:
        response = await self._request(
            "POST", "/api/v1/note/list", json_body=query.model_dump(by_alias=True)
        )
        return [Note.model_validate(item) for item in self._json(response)]

    async def get_daily_review_notes(self) -> list[Note]:
        response = await self._request("GET", "/api/v1/note/daily-review-list")
        return [Note.model_validate(item) for item in self._json(response)]

    async def clear_recycle_bin(self) -> dict[str, bool]:
        await self._request("POST", "/api/v1/note/clear-recycle-bin")
        return {"success": True}

    async def upsert_note(self, content: str, type: int = 0) -> Note:
        """Create a note. type: 0 flash, 1 normal, 2 todo."""
        if not content:
            raise ArgumentError("invalid content")
        if type not in (0, 1, 2):
            raise ArgumentError(f"invalid note type: {type}")

        response = await self._request(
            "POST", "/api/v1/note/upsert", json_body={"content": content, "type": type}
        )
        return Note.model_validate(self._json(response))

    async def update_note(self, note_id: int, updates: NoteUpdate) -> dict[str, bool]:
        fields = updates.model_dump(by_alias=True, exclude_unset=True)
        await self._request(
            "POST",
            UPDATE_RPC_PATH,
            params=BATCH_PARAMS,
            json_body={"0": {"json": {"id": note_id, **fields}}},
            error_prefix="Failed to update note:",
        )
        return {"success": True}

    async def delete_note(self, note_id: int) -> dict[str, bool]:
        await self._request(
            "POST",
            DELETE_RPC_PATH,
            params=BATCH_PARAMS,
            json_body={"0": {"json": {"ids": [note_id]}}},
            error_prefix="Failed to delete note:",
        )
        return {"success": True}

    async def archive_note(self, note_id: int) -> dict[str, bool]:
        return await self.update_note(note_id, NoteUpdate(is_archived=True))

    async def share_note(self, note_id: int, password: str = "", is_cancel: bool = False) -> ShareNoteResult:
        response = await self._request(
            "POST",
            "/api/v1/note/share",
            json_body={"id": note_id, "isCancel": is_cancel, "password": password},
        )
        return ShareNoteResult.model_validate(self._json(response))
