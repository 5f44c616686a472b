"""
Blinko MCP Server
Protocol version: 2025-11-25

Exposes a Blinko note-taking instance to MCP clients:
  - Tools: upsert_blinko_flash_note, upsert_blinko_note, upsert_blinko_todo,
           update_blinko_note, delete_blinko_note, archive_blinko_note,
           complete_blinko_todo, share_blinko_note, search_blinko_notes,
           review_blinko_daily_notes, clear_blinko_recycle_bin

Run with:  mcp-server-blinko --blinko_domain=example.com --blinko_api_key=your-api-key
"""

import logging
import sys
from typing import Annotated, Any, Literal

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent, ToolAnnotations
from pydantic import Field

from mcp_server_blinko.arguments import PASSWORD_PATTERN
from mcp_server_blinko.config import Settings, load_settings
from mcp_server_blinko.tools import call_tool

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Server instance
# ---------------------------------------------------------------------------
mcp = FastMCP(
    "mcp-server-blinko-extended",
    instructions=(
        "Write, search, update, share and archive notes in a Blinko instance. "
        "Note types: 0 = flash note, 1 = normal note, 2 = todo."
    ),
)

# Replaced by main() once flags and environment have been read.
settings = Settings()


def _present(**arguments: Any) -> dict[str, Any]:
    """Drop arguments the caller left out so absence is not sent as null."""
    return {key: value for key, value in arguments.items() if value is not None}


async def _run(name: str, **arguments: Any) -> list[TextContent]:
    return await call_tool(name, _present(**arguments), settings)


Content = Annotated[str, Field(description="Text content of the note")]

WRITE = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=True)
EDIT = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=True, openWorldHint=True)
DESTROY = ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=True, openWorldHint=True)
READ = ToolAnnotations(readOnlyHint=True, openWorldHint=True)

# ---------------------------------------------------------------------------
# Tools: writing notes
# ---------------------------------------------------------------------------

@mcp.tool(annotations=WRITE, structured_output=False)
async def upsert_blinko_flash_note(content: Content) -> list[TextContent]:
    """Create or update a flash note (type 0) in Blinko. Flash notes are designed for quick thoughts, ideas, or brief observations that you want to capture rapidly."""
    return await _run("upsert_blinko_flash_note", content=content)


@mcp.tool(annotations=WRITE, structured_output=False)
async def upsert_blinko_note(content: Content) -> list[TextContent]:
    """Create or update a normal note (type 1) in Blinko. Normal notes are suitable for detailed content, longer thoughts, documentation, or structured information."""
    return await _run("upsert_blinko_note", content=content)


@mcp.tool(annotations=WRITE, structured_output=False)
async def upsert_blinko_todo(
    content: Annotated[str, Field(description="Text content of the todo")],
) -> list[TextContent]:
    """Create or update a todo note (type 2) in Blinko. Todo notes are designed for task management, checklists, and action items that need to be tracked and completed."""
    return await _run("upsert_blinko_todo", content=content)


# ---------------------------------------------------------------------------
# Tools: changing existing notes
# ---------------------------------------------------------------------------

@mcp.tool(annotations=EDIT, structured_output=False)
async def update_blinko_note(
    noteId: Annotated[int, Field(description="The ID of the note to update")],
    content: Annotated[str | None, Field(description="New content for the note (optional)")] = None,
    type: Annotated[
        Literal[0, 1, 2] | None, Field(description="Note type: 0=flash, 1=normal, 2=todo (optional)")
    ] = None,
    isArchived: Annotated[bool | None, Field(description="Set to true to archive the note (optional)")] = None,
    isRecycle: Annotated[
        bool | None, Field(description="Set to true to move the note to the recycle bin (optional)")
    ] = None,
    isTop: Annotated[bool | None, Field(description="Set to true to pin the note to top (optional)")] = None,
) -> list[TextContent]:
    """Update an existing note in Blinko by ID. Can modify content, type, or status flags like archived or pinned. Only the fields you pass are changed."""
    return await _run(
        "update_blinko_note",
        noteId=noteId,
        content=content,
        type=type,
        isArchived=isArchived,
        isRecycle=isRecycle,
        isTop=isTop,
    )


@mcp.tool(annotations=DESTROY, structured_output=False)
async def delete_blinko_note(
    noteId: Annotated[int, Field(description="The ID of the note to delete")],
) -> list[TextContent]:
    """Permanently delete a note from Blinko by ID. WARNING: This action cannot be undone."""
    return await _run("delete_blinko_note", noteId=noteId)


@mcp.tool(annotations=EDIT, structured_output=False)
async def archive_blinko_note(
    noteId: Annotated[int, Field(description="The ID of the note to archive")],
) -> list[TextContent]:
    """Archive a note in Blinko (move to archive without deleting). Archived notes are preserved but hidden from main view."""
    return await _run("archive_blinko_note", noteId=noteId)


@mcp.tool(annotations=EDIT, structured_output=False)
async def complete_blinko_todo(
    noteId: Annotated[int, Field(description="The ID of the todo to complete")],
) -> list[TextContent]:
    """Mark a todo as complete by archiving it. Use this when you finish a tracked task. The todo is preserved in archive for metrics/history."""
    return await _run("complete_blinko_todo", noteId=noteId)


@mcp.tool(annotations=EDIT, structured_output=False)
async def share_blinko_note(
    noteId: Annotated[
        int,
        Field(description="ID of the note to share. Use the ID from search results or note creation responses."),
    ],
    password: Annotated[
        str | None,
        Field(
            description=(
                "Optional six-digit password for sharing protection (e.g., '123456'). "
                "If provided, viewers will need this password to access the shared note."
            ),
            pattern=PASSWORD_PATTERN,
        ),
    ] = None,
    isCancel: Annotated[
        bool | None,
        Field(
            description=(
                "Set to true to cancel/disable sharing for this note (default: false). "
                "Use this to revoke public access to a previously shared note."
            )
        ),
    ] = None,
) -> list[TextContent]:
    """Share a note publicly or cancel an existing share. Creates a public link that others can access, optionally protected with a password."""
    return await _run("share_blinko_note", noteId=noteId, password=password, isCancel=isCancel)


# ---------------------------------------------------------------------------
# Tools: reading notes
# ---------------------------------------------------------------------------

@mcp.tool(annotations=READ, structured_output=False)
async def search_blinko_notes(
    searchText: Annotated[
        str,
        Field(description="Search keyword or phrase. Use this to find notes containing specific text content."),
    ],
    size: Annotated[
        int | None,
        Field(description="Number of results to return (default: 5). Use larger values when you need more comprehensive search results."),
    ] = None,
    type: Annotated[
        int | None,
        Field(description="Note type filter: -1 for all types (default), 0 for flash notes, 1 for normal notes, 2 for todo notes."),
    ] = None,
    isArchived: Annotated[
        bool | None,
        Field(description="Search in archived notes (default: false)."),
    ] = None,
    isRecycle: Annotated[
        bool | None,
        Field(description="Search in recycled/deleted notes (default: false). Set to true when you need to recover or find deleted notes."),
    ] = None,
    isUseAiQuery: Annotated[
        bool | None,
        Field(description="Use AI-powered semantic search (default: true). Set to false for exact text matching only."),
    ] = None,
    startDate: Annotated[
        str | None,
        Field(description="Start date for time-based filtering in ISO format (e.g. 2025-03-03T00:00:00.000Z)."),
    ] = None,
    endDate: Annotated[
        str | None,
        Field(description="End date for time-based filtering in ISO format (e.g. 2025-03-03T00:00:00.000Z)."),
    ] = None,
    hasTodo: Annotated[
        bool | None,
        Field(description="Search only in notes containing todo items (default: false)."),
    ] = None,
) -> list[TextContent]:
    """Search for notes in Blinko. Returns notes with content, timestamps, and metadata."""
    return await _run(
        "search_blinko_notes",
        searchText=searchText,
        size=size,
        type=type,
        isArchived=isArchived,
        isRecycle=isRecycle,
        isUseAiQuery=isUseAiQuery,
        startDate=startDate,
        endDate=endDate,
        hasTodo=hasTodo,
    )


@mcp.tool(annotations=READ, structured_output=False)
async def review_blinko_daily_notes() -> list[TextContent]:
    """Retrieve today's notes for daily review and reflection. This helps with reviewing recent thoughts, tasks, and ideas to maintain productivity and mindfulness."""
    return await _run("review_blinko_daily_notes")


@mcp.tool(annotations=DESTROY, structured_output=False)
async def clear_blinko_recycle_bin() -> list[TextContent]:
    """Permanently delete all notes in the recycle bin. WARNING: This action cannot be undone. Use only when you're certain you want to permanently remove all deleted notes."""
    return await _run("clear_blinko_recycle_bin")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None):
    global settings
    settings = load_settings(argv)

    # stdout belongs to the stdio transport
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.WARNING,
        format="%(asctime)s - [blinko] - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        if settings.transport == "streamable-http":
            mcp.settings.host = settings.host
            mcp.settings.port = settings.port
        mcp.run(transport=settings.transport)
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
