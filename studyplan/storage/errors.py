"""Errors raised by the planner storage layer."""


class ConfigImportError(Exception):
    """Raised when an import document cannot be parsed or holds invalid data."""

    pass
