"""
Base model with common fields for all database models.

Provides opaque string primary keys, automatic UTC timestamps and
serialization helpers.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime
from typing import Dict, Any, Optional


def generate_id() -> str:
    """Generate an opaque string identifier."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime read back from the store to aware UTC.

    SQLite drops tzinfo on DateTime(timezone=True) columns, PostgreSQL keeps it.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BaseModel:
    """
    Abstract base model with common fields for all models.

    Provides:
    - Opaque string primary key (id)
    - Automatic timestamps (created_at, updated_at)
    - Serialization helpers (to_dict)

    Usage:
        class Studio(BaseModel, db.Model):
            __tablename__ = 'studios'
            name = Column(String(255), nullable=False)
    """

    id = Column(
        String(36),
        primary_key=True,
        default=generate_id,
        nullable=False,
        comment="Opaque identifier for the record"
    )

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Timestamp when record was created (UTC)"
    )

    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="Timestamp when record was last updated (UTC)"
    )

    def to_dict(self, exclude: Optional[list] = None) -> Dict[str, Any]:
        """
        Convert model instance to dictionary for JSON serialization.

        Args:
            exclude: List of column names to leave out

        Returns:
            Dictionary of column values, datetimes as ISO 8601 strings
        """
        exclude = exclude or []
        result = {}

        for column in self.__table__.columns:
            field_name = column.name
            if field_name in exclude:
                continue

            value = getattr(self, field_name, None)

            if isinstance(value, datetime):
                result[field_name] = as_utc(value).isoformat()
            else:
                result[field_name] = value

        return result

    def update_from_dict(self, data: Dict[str, Any], allowed_fields: list):
        """
        Update model fields from dictionary.

        Only keys present in both data and allowed_fields are applied.

        Returns:
            List of field names that were updated
        """
        updated = []
        for field_name, value in data.items():
            if field_name in allowed_fields and hasattr(self, field_name):
                setattr(self, field_name, value)
                updated.append(field_name)
        return updated

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"
