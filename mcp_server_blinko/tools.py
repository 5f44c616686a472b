"""
Tool dispatch for the Blinko MCP server.

call_tool() is the single entry point: it checks configuration, looks up
the tool, validates the raw arguments into the tool's argument model,
runs the handler against a fresh BlinkoClient and returns text blocks.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from mcp.types import TextContent

from mcp_server_blinko.arguments import (
    ContentArguments,
    NoteIdArguments,
    SearchArguments,
    ShareNoteArguments,
    ToolArguments,
    UpdateNoteArguments,
    parse_arguments,
)
from mcp_server_blinko.blinko import BlinkoClient, NoteUpdate, SearchQuery
from mcp_server_blinko.config import Settings
from mcp_server_blinko.errors import BlinkoError, UnknownToolError
from mcp_server_blinko.formatting import note_list_blocks, text_block

logger = logging.getLogger(__name__)

Handler = Callable[[BlinkoClient, Any], Awaitable[list[TextContent]]]


class NoArguments(ToolArguments):
    pass


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _upsert(note_type: int) -> Handler:
    async def handler(client: BlinkoClient, args: ContentArguments) -> list[TextContent]:
        note = await client.upsert_note(args.content, type=note_type)
        return [text_block(f"Successfully wrote note to Blinko. Note ID: {note.id}")]

    return handler


async def _update_note(client: BlinkoClient, args: UpdateNoteArguments) -> list[TextContent]:
    await client.update_note(args.note_id, NoteUpdate(**args.updates()))
    return [text_block(f"Successfully updated note {args.note_id}")]


async def _delete_note(client: BlinkoClient, args: NoteIdArguments) -> list[TextContent]:
    await client.delete_note(args.note_id)
    return [text_block(f"Successfully deleted note {args.note_id}")]


def _archive(action: str) -> Handler:
    # archive and complete-todo are the same state change, worded differently
    async def handler(client: BlinkoClient, args: NoteIdArguments) -> list[TextContent]:
        await client.archive_note(args.note_id)
        return [text_block(f"Successfully {action} note {args.note_id}")]

    return handler


async def _share_note(client: BlinkoClient, args: ShareNoteArguments) -> list[TextContent]:
    result = await client.share_note(args.note_id, password=args.password, is_cancel=args.is_cancel)

    if not result.is_share:
        return [text_block(f"Successfully cancelled sharing for note (ID: {result.id})")]

    blocks = [text_block(f"Successfully shared note (ID: {result.id})")]
    if result.share_password:
        blocks.append(text_block(f"Share password: {result.share_password}"))
    blocks.append(text_block(f"Share link: {result.share_encrypted_url or 'N/A'}"))
    return blocks


async def _search_notes(client: BlinkoClient, args: SearchArguments) -> list[TextContent]:
    query = SearchQuery(**args.model_dump())
    notes = await client.search_notes(query)
    return note_list_blocks(notes, f"Found {len(notes)} note(s):")


async def _review_daily_notes(client: BlinkoClient, args: NoArguments) -> list[TextContent]:
    notes = await client.get_daily_review_notes()
    return note_list_blocks(notes, f"Found {len(notes)} note(s) for today's review:")


async def _clear_recycle_bin(client: BlinkoClient, args: NoArguments) -> list[TextContent]:
    result = await client.clear_recycle_bin()
    if not result.get("success"):
        raise BlinkoError("Failed to clear recycle bin")
    return [text_block("Successfully cleared Blinko recycle bin.")]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

TOOLS: dict[str, tuple[type[ToolArguments], Handler]] = {
    "upsert_blinko_flash_note": (ContentArguments, _upsert(0)),
    "upsert_blinko_note": (ContentArguments, _upsert(1)),
    "upsert_blinko_todo": (ContentArguments, _upsert(2)),
    "update_blinko_note": (UpdateNoteArguments, _update_note),
    "delete_blinko_note": (NoteIdArguments, _delete_note),
    "archive_blinko_note": (NoteIdArguments, _archive("archived")),
    "complete_blinko_todo": (NoteIdArguments, _archive("completed")),
    "share_blinko_note": (ShareNoteArguments, _share_note),
    "search_blinko_notes": (SearchArguments, _search_notes),
    "review_blinko_daily_notes": (NoArguments, _review_daily_notes),
    "clear_blinko_recycle_bin": (NoArguments, _clear_recycle_bin),
}


async def call_tool(
    name: str,
    arguments: dict[str, Any] | None,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[TextContent]:
    """Run one tool invocation end to end."""
    settings.require()

    if name not in TOOLS:
        raise UnknownToolError(name)
    model, handler = TOOLS[name]

    args = parse_arguments(model, arguments)
    logger.debug("calling %s", name)

    client = BlinkoClient(settings.domain, settings.api_key, transport=transport)
    return await handler(client, args)
