"""Shared model helpers."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(UTC)


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self, **kwargs) -> dict:
        """Serialize with camelCase keys for JSON responses."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


def clean_tags(values: list[str] | None) -> list[str]:
    """Trim entries, drop empty ones and remove duplicates, keeping order."""
    seen: list[str] = []
    for value in values or []:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen
