"""Key-value storage backends used to persist notification data."""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from agricomms.infrastructure.models import KeyValueEntryModel

logger = logging.getLogger(__name__)


class StorageReadError(RuntimeError):
    """Raised when a backend cannot read a stored value."""


class StorageWriteError(RuntimeError):
    """Raised when a backend cannot persist or remove a value."""


class KeyValueStore(Protocol):
    """Minimal interface shared by every storage backend."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local storage backed by a dictionary."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        """Return the stored keys, mostly useful in tests."""

        return list(self._values)


class SqlAlchemyKeyValueStore:
    """Storage backend persisting one row per key through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        session = self._session_factory()
        try:
            model = session.get(KeyValueEntryModel, key)
            return model.value if model is not None else None
        except SQLAlchemyError as exc:
            raise StorageReadError(f"Unable to read key '{key}'") from exc
        finally:
            session.close()

    def set(self, key: str, value: str) -> None:
        session = self._session_factory()
        try:
            model = session.get(KeyValueEntryModel, key)
            if model is None:
                model = KeyValueEntryModel(key=key, value=value)
            else:
                model.value = value
            session.add(model)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to persist key '%s': %s", key, exc)
            raise StorageWriteError(f"Unable to persist key '{key}'") from exc
        finally:
            session.close()

    def remove(self, key: str) -> None:
        session = self._session_factory()
        try:
            session.query(KeyValueEntryModel).filter(KeyValueEntryModel.key == key).delete(
                synchronize_session=False
            )
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to remove key '%s': %s", key, exc)
            raise StorageWriteError(f"Unable to remove key '{key}'") from exc
        finally:
            session.close()


__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SqlAlchemyKeyValueStore",
    "StorageReadError",
    "StorageWriteError",
]
