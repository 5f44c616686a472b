"""Rendering of Blinko notes into MCP text blocks."""

from datetime import datetime

from mcp.types import TextContent

from mcp_server_blinko.blinko import Note

TYPE_LABELS = {
    0: "Flash Note",
    1: "Normal Note",
    2: "Todo Note",
}


def text_block(text: str) -> TextContent:
    return TextContent(type="text", text=text)


def type_label(note_type: int) -> str:
    return TYPE_LABELS.get(note_type, "Unknown")


def format_date(value: str | None) -> str:
    """Render an ISO-8601 timestamp in local time, or return it unchanged."""
    if value is None:
        return ""
    try:
        # fromisoformat() only accepts a trailing "Z" from Python 3.11
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def format_note(note: Note) -> str:
    return (
        f"- [ID: {note.id}] [{type_label(note.type)}] {note.content or ''}\n"
        f"  Created: {format_date(note.created_at)} | Updated: {format_date(note.updated_at)}"
    )


def note_list_blocks(notes: list[Note], header: str) -> list[TextContent]:
    """A header block followed by one block per note."""
    return [text_block(header)] + [text_block(format_note(note)) for note in notes]
