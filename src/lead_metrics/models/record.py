"""Record representation for rows fetched from the remote table."""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """
    One row from a remote table.
    Field labels are defined by the backend, so values are read through the
    accessors below, which always hand back a default for missing fields.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    fields: dict[str, Any] = Field(default_factory=dict)

    def has(self, label: str) -> bool:
        return label in self.fields and self.fields[label] is not None

    def get_text(self, label: str, default: Optional[str] = None) -> Optional[str]:
        """Return the field as a string, or default when absent or empty."""
        value = self.fields.get(label)
        if value is None or isinstance(value, (list, dict)):
            return default
        text = str(value)
        return text if text else default

    def get_links(self, label: str) -> list[str]:
        """Linked record ids; empty when the field is absent or not a list."""
        value = self.fields.get(label)
        if not isinstance(value, list):
            return []
        return [v for v in value if isinstance(v, str)]

    def get_number(self, label: str) -> Optional[Decimal]:
        """Numeric field as Decimal; None when absent or non-numeric."""
        value = self.fields.get(label)
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float, Decimal)):
            number = Decimal(str(value))
        elif isinstance(value, str):
            try:
                number = Decimal(value.strip())
            except InvalidOperation:
                return None
        else:
            return None
        return number if number.is_finite() else None

    def get_attachments(self, label: str) -> list[dict[str, Any]]:
        """Attachment objects (dicts) stored under label."""
        value = self.fields.get(label)
        if not isinstance(value, list):
            return []
        return [v for v in value if isinstance(v, dict)]


Collection = list[Record]
