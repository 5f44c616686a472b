"""MCP server for the Blinko note-taking service."""

__version__ = "1.0.0"
