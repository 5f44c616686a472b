"""End-to-end tests of tool dispatch against a stub Blinko service."""

from __future__ import annotations

import pytest

from conftest import make_note
from mcp_server_blinko.config import Settings
from mcp_server_blinko.errors import (
    ArgumentError,
    ConfigurationError,
    ErrorKind,
    UnknownToolError,
    UpstreamError,
)
from mcp_server_blinko.tools import TOOLS, call_tool


def texts(blocks):
    return [block.text for block in blocks]


def test_catalog():
    assert set(TOOLS) == {
        "upsert_blinko_flash_note",
        "upsert_blinko_note",
        "upsert_blinko_todo",
        "update_blinko_note",
        "delete_blinko_note",
        "archive_blinko_note",
        "complete_blinko_todo",
        "share_blinko_note",
        "search_blinko_notes",
        "review_blinko_daily_notes",
        "clear_blinko_recycle_bin",
    }


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("settings", "message"),
    [
        (Settings(domain="", api_key="secret-key"), "Blinko domain not set"),
        (Settings(domain="blinko.test", api_key=""), "Blinko API key not set"),
    ],
)
async def test_missing_configuration_fails_before_dispatch(stub, settings, message):
    with pytest.raises(ConfigurationError, match=message):
        await call_tool("review_blinko_daily_notes", {}, settings, transport=stub.transport)
    assert stub.requests == []


@pytest.mark.asyncio
async def test_configuration_checked_before_tool_lookup(stub):
    with pytest.raises(ConfigurationError):
        await call_tool("no_such_tool", {}, Settings(), transport=stub.transport)


@pytest.mark.asyncio
async def test_unknown_tool(stub, settings):
    with pytest.raises(UnknownToolError, match="Unknown tool") as exc_info:
        await call_tool("no_such_tool", {}, settings, transport=stub.transport)
    assert exc_info.value.kind is ErrorKind.UNKNOWN_TOOL


# ---------------------------------------------------------------------------
# Writing notes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("tool", "note_type"),
    [("upsert_blinko_flash_note", 0), ("upsert_blinko_note", 1), ("upsert_blinko_todo", 2)],
)
async def test_upsert_tools(stub, settings, tool, note_type):
    stub.route("POST", "/api/v1/note/upsert", json_body=make_note(id=42, type=note_type))

    blocks = await call_tool(tool, {"content": "buy milk"}, settings, transport=stub.transport)

    assert texts(blocks) == ["Successfully wrote note to Blinko. Note ID: 42"]
    assert stub.last_json() == {"content": "buy milk", "type": note_type}


@pytest.mark.asyncio
async def test_upsert_empty_content(stub, settings):
    with pytest.raises(ArgumentError):
        await call_tool("upsert_blinko_todo", {"content": ""}, settings, transport=stub.transport)
    assert stub.requests == []


@pytest.mark.asyncio
async def test_update_forwards_only_supplied_fields(stub, settings):
    stub.route("POST", "/api/trpc/notes.upsert")

    blocks = await call_tool("update_blinko_note", {"noteId": 5}, settings, transport=stub.transport)

    assert texts(blocks) == ["Successfully updated note 5"]
    assert stub.last_json() == {"0": {"json": {"id": 5}}}


@pytest.mark.asyncio
async def test_update_with_fields(stub, settings):
    stub.route("POST", "/api/trpc/notes.upsert")

    await call_tool(
        "update_blinko_note",
        {"noteId": "5", "content": "new text", "type": 1, "isArchived": False, "isTop": True},
        settings,
        transport=stub.transport,
    )

    assert stub.last_json() == {
        "0": {"json": {"id": 5, "content": "new text", "type": 1, "isArchived": False, "isTop": True}}
    }


@pytest.mark.asyncio
async def test_update_requires_numeric_id(stub, settings):
    with pytest.raises(ArgumentError, match="Valid note ID is required"):
        await call_tool("update_blinko_note", {"noteId": "abc"}, settings, transport=stub.transport)
    assert stub.requests == []


@pytest.mark.asyncio
async def test_delete(stub, settings):
    stub.route("POST", "/api/trpc/notes.deleteMany")

    blocks = await call_tool("delete_blinko_note", {"noteId": 9}, settings, transport=stub.transport)

    assert texts(blocks) == ["Successfully deleted note 9"]
    assert stub.last_json() == {"0": {"json": {"ids": [9]}}}


@pytest.mark.asyncio
async def test_complete_and_archive_issue_the_same_mutation(stub, settings):
    stub.route("POST", "/api/trpc/notes.upsert")

    archived = await call_tool("archive_blinko_note", {"noteId": 7}, settings, transport=stub.transport)
    completed = await call_tool("complete_blinko_todo", {"noteId": 7}, settings, transport=stub.transport)

    first, second = stub.requests
    assert first.url == second.url
    assert first.content == second.content
    assert stub.last_json() == {"0": {"json": {"id": 7, "isArchived": True}}}
    assert texts(archived) == ["Successfully archived note 7"]
    assert texts(completed) == ["Successfully completed note 7"]


# ---------------------------------------------------------------------------
# Sharing
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_share_with_password(stub, settings):
    stub.route(
        "POST",
        "/api/v1/note/share",
        json_body={"id": 3, "isShare": True, "sharePassword": "123456", "shareEncryptedUrl": "s/abc"},
    )

    blocks = await call_tool(
        "share_blinko_note", {"noteId": 3, "password": "123456"}, settings, transport=stub.transport
    )

    assert texts(blocks) == [
        "Successfully shared note (ID: 3)",
        "Share password: 123456",
        "Share link: s/abc",
    ]
    assert stub.last_json() == {"id": 3, "isCancel": False, "password": "123456"}


@pytest.mark.asyncio
async def test_share_without_link(stub, settings):
    stub.route("POST", "/api/v1/note/share", json_body={"id": 3, "isShare": True, "shareEncryptedUrl": None})

    blocks = await call_tool("share_blinko_note", {"noteId": 3}, settings, transport=stub.transport)

    assert texts(blocks) == ["Successfully shared note (ID: 3)", "Share link: N/A"]
    assert stub.last_json()["password"] == ""


@pytest.mark.asyncio
async def test_share_cancel(stub, settings):
    stub.route("POST", "/api/v1/note/share", json_body={"id": 3, "isShare": False})

    blocks = await call_tool(
        "share_blinko_note", {"noteId": 3, "isCancel": True}, settings, transport=stub.transport
    )

    assert texts(blocks) == ["Successfully cancelled sharing for note (ID: 3)"]
    assert stub.last_json()["isCancel"] is True


@pytest.mark.asyncio
async def test_share_rejects_short_password(stub, settings):
    with pytest.raises(ArgumentError, match="6 digits"):
        await call_tool("share_blinko_note", {"noteId": 3, "password": "12345"}, settings, transport=stub.transport)
    assert stub.requests == []


# ---------------------------------------------------------------------------
# Reading notes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_search_with_no_results(stub, settings):
    stub.route("POST", "/api/v1/note/list", json_body=[])

    blocks = await call_tool("search_blinko_notes", {"searchText": "project"}, settings, transport=stub.transport)

    assert texts(blocks) == ["Found 0 note(s):"]


@pytest.mark.asyncio
@pytest.mark.parametrize(("type_arg", "expected"), [(None, -1), (5, -1), (2, 2)])
async def test_search_type_filter(stub, settings, type_arg, expected):
    stub.route("POST", "/api/v1/note/list", json_body=[])
    arguments = {"searchText": "project"}
    if type_arg is not None:
        arguments["type"] = type_arg

    await call_tool("search_blinko_notes", arguments, settings, transport=stub.transport)

    assert stub.last_json()["type"] == expected


@pytest.mark.asyncio
async def test_search_renders_notes(stub, settings):
    stub.route(
        "POST",
        "/api/v1/note/list",
        json_body=[make_note(id=1, content="alpha"), make_note(id=2, type=1, content="beta", createdAt="not-a-date")],
    )

    blocks = await call_tool(
        "search_blinko_notes",
        {"searchText": "project", "size": 10, "isUseAiQuery": False, "hasTodo": True},
        settings,
        transport=stub.transport,
    )

    lines = texts(blocks)
    assert lines[0] == "Found 2 note(s):"
    assert lines[1].startswith("- [ID: 1] [Flash Note] alpha\n  Created: ")
    assert lines[2].startswith("- [ID: 2] [Normal Note] beta\n  Created: not-a-date | Updated: ")

    body = stub.last_json()
    assert body["size"] == 10
    assert body["isUseAiQuery"] is False
    assert body["hasTodo"] is True


@pytest.mark.asyncio
async def test_search_requires_text(stub, settings):
    with pytest.raises(ArgumentError, match="searchText"):
        await call_tool("search_blinko_notes", {}, settings, transport=stub.transport)


@pytest.mark.asyncio
async def test_daily_review(stub, settings):
    stub.route("GET", "/api/v1/note/daily-review-list", json_body=[make_note(id=8, type=2, content="stand-up")])

    blocks = await call_tool("review_blinko_daily_notes", None, settings, transport=stub.transport)

    lines = texts(blocks)
    assert lines[0] == "Found 1 note(s) for today's review:"
    assert lines[1].startswith("- [ID: 8] [Todo Note] stand-up")


@pytest.mark.asyncio
async def test_clear_recycle_bin(stub, settings):
    stub.route("POST", "/api/v1/note/clear-recycle-bin")

    blocks = await call_tool("clear_blinko_recycle_bin", {}, settings, transport=stub.transport)

    assert texts(blocks) == ["Successfully cleared Blinko recycle bin."]


@pytest.mark.asyncio
async def test_upstream_errors_propagate(stub, settings):
    stub.route("POST", "/api/trpc/notes.deleteMany", status=404, text="note not found")

    with pytest.raises(UpstreamError) as exc_info:
        await call_tool("delete_blinko_note", {"noteId": 1}, settings, transport=stub.transport)

    assert "404" in str(exc_info.value)
    assert "note not found" in str(exc_info.value)


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["123456\n", "١٢٣٤٥٦"])
async def test_share_rejects_non_ascii_or_trailing_newline_password(stub, settings, password):
    with pytest.raises(ArgumentError, match="6 digits"):
        await call_tool("share_blinko_note", {"noteId": 3, "password": password}, settings, transport=stub.transport)
    assert stub.requests == []


@pytest.mark.asyncio
async def test_update_sends_explicit_empty_content(stub, settings):
    stub.route("POST", "/api/trpc/notes.upsert")

    await call_tool("update_blinko_note", {"noteId": 5, "content": ""}, settings, transport=stub.transport)

    assert stub.last_json() == {"0": {"json": {"id": 5, "content": ""}}}


@pytest.mark.asyncio
async def test_search_tolerates_null_fields(stub, settings):
    stub.route(
        "POST",
        "/api/v1/note/list",
        json_body=[{"id": 1, "type": 0, "content": "x", "createdAt": None, "updatedAt": None}],
    )

    blocks = await call_tool("search_blinko_notes", {"searchText": "x"}, settings, transport=stub.transport)

    assert texts(blocks) == ["Found 1 note(s):", "- [ID: 1] [Flash Note] x\n  Created:  | Updated: "]
