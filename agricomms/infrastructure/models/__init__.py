"""SQLAlchemy models used by the infrastructure layer."""

from .key_value import KeyValueEntryModel

__all__ = ["KeyValueEntryModel"]
