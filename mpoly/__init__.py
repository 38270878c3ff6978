"""Mpoly API: authenticated, role-scoped record management over flat XML files."""

__version__ = "1.0.0"
