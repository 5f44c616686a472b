"""
Argument models for the Blinko tools.

MCP hands tools an untyped JSON object. Each tool validates it into one of
these models before the client is touched; pydantic errors are turned into
ArgumentError by parse_arguments().
"""

import math
import re
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from mcp_server_blinko.errors import ArgumentError

PASSWORD_PATTERN = r"^\d{6}$"
DEFAULT_SEARCH_SIZE = 5

# ASCII digits only, anchored at the real end of the string
_PASSWORD_RE = re.compile(r"[0-9]{6}")


def _as_text(value: Any) -> Any:
    """Numbers become text; anything else is left for pydantic to judge."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _as_optional_text(value: Any) -> Any:
    if value is None or value == "":
        return None
    return _as_text(value)


Text = Annotated[str, BeforeValidator(_as_text)]
OptionalText = Annotated[str | None, BeforeValidator(_as_optional_text)]


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ContentArguments(ToolArguments):
    content: Text = Field(min_length=1)


class NoteIdArguments(ToolArguments):
    note_id: int = Field(alias="noteId")

    @field_validator("note_id", mode="before")
    @classmethod
    def _coerce_note_id(cls, value: Any) -> int:
        if isinstance(value, bool) or value is None or value == "":
            raise ValueError("Valid note ID is required")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError("Valid note ID is required") from None
        # 0 is never a valid Blinko id
        if not math.isfinite(number) or number == 0 or not number.is_integer():
            raise ValueError("Valid note ID is required")
        return int(number)


class UpdateNoteArguments(NoteIdArguments):
    content: Text | None = None
    type: int | None = None
    is_archived: bool | None = Field(default=None, alias="isArchived")
    is_recycle: bool | None = Field(default=None, alias="isRecycle")
    is_top: bool | None = Field(default=None, alias="isTop")

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: int | None) -> int | None:
        if value is not None and value not in (0, 1, 2):
            raise ValueError("Note type must be 0, 1 or 2")
        return value

    def updates(self) -> dict[str, Any]:
        """The optional fields the caller actually supplied."""
        return self.model_dump(
            include={"content", "type", "is_archived", "is_recycle", "is_top"},
            exclude_none=True,
        )


class ShareNoteArguments(NoteIdArguments):
    password: OptionalText = ""
    is_cancel: bool = Field(default=False, alias="isCancel")

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str | None) -> str:
        if value is None:
            return ""
        if not _PASSWORD_RE.fullmatch(value):
            raise ValueError("Password must be exactly 6 digits")
        return value


class SearchArguments(ToolArguments):
    search_text: Text = Field(alias="searchText", min_length=1)
    size: int = DEFAULT_SEARCH_SIZE
    type: int = -1
    is_archived: bool = Field(default=False, alias="isArchived")
    is_recycle: bool = Field(default=False, alias="isRecycle")
    is_use_ai_query: bool = Field(default=True, alias="isUseAiQuery")
    start_date: OptionalText = Field(default=None, alias="startDate")
    end_date: OptionalText = Field(default=None, alias="endDate")
    has_todo: bool = Field(default=False, alias="hasTodo")

    @field_validator("size", mode="before")
    @classmethod
    def _default_size(cls, value: Any) -> int:
        try:
            size = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_SEARCH_SIZE
        return size if size > 0 else DEFAULT_SEARCH_SIZE

    @field_validator("type", mode="before")
    @classmethod
    def _any_type_unless_known(cls, value: Any) -> int:
        # Only the integers 0, 1 and 2 narrow the search; everything else means all types.
        if isinstance(value, int) and not isinstance(value, bool) and value in (0, 1, 2):
            return value
        return -1

    @field_validator("is_archived", "is_recycle", "is_use_ai_query", "has_todo", mode="before")
    @classmethod
    def _null_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


def parse_arguments(model: type[ToolArguments], arguments: dict[str, Any] | None) -> Any:
    """Validate a raw argument bag, raising ArgumentError on failure."""
    try:
        return model.model_validate(arguments or {})
    except ValidationError as e:
        raise ArgumentError(_summarize(e), detail=str(e)) from e


def _summarize(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "arguments"
        if item["type"] == "missing":
            messages.append(f"{field} is required")
        else:
            messages.append(f"{field}: {item['msg'].removeprefix('Value error, ')}")
    return "; ".join(messages)
