"""
Error types raised by the Blinko client and the tool dispatcher.

Every failure carries an ErrorKind so callers can branch on the category
instead of parsing message text:
  - CONFIGURATION: domain or API key missing
  - VALIDATION:    tool arguments missing or malformed
  - UPSTREAM:      Blinko answered with a non-2xx status
  - TRANSPORT:     the HTTP request never got a response
  - UNKNOWN_TOOL:  no tool registered under the requested name
"""

from enum import Enum


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    UPSTREAM = "upstream"
    TRANSPORT = "transport"
    UNKNOWN_TOOL = "unknown_tool"


class BlinkoError(Exception):
    """Base exception for all Blinko MCP errors."""

    kind: ErrorKind = ErrorKind.UPSTREAM

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ConfigurationError(BlinkoError):
    kind = ErrorKind.CONFIGURATION


class ArgumentError(BlinkoError):
    """Raised when tool arguments fail validation, before any request is sent."""

    kind = ErrorKind.VALIDATION


class UpstreamError(BlinkoError):
    """Raised when Blinko returns a non-2xx response."""

    kind = ErrorKind.UPSTREAM

    def __init__(self, status_code: int, body: str, prefix: str = "request failed with status"):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{prefix} {status_code}: {body}")


class BlinkoTransportError(BlinkoError):
    """Raised when the request fails at the network level."""

    kind = ErrorKind.TRANSPORT


class UnknownToolError(BlinkoError):
    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")
