"""SQLAlchemy model for the key-value storage table."""

from sqlalchemy import Column, DateTime, String, Text

from agricomms.infrastructure.database import Base
from agricomms.utils import now_in_app_timezone


class KeyValueEntryModel(Base):
    """Database representation of a single stored key."""

    __tablename__ = "key_value_entry"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=now_in_app_timezone,
        onupdate=now_in_app_timezone,
    )


__all__ = ["KeyValueEntryModel"]
