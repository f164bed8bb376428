"""Course sections service: manage the ordered sections of a course over MCP."""

__version__ = "0.1.0"
