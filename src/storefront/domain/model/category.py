"""Category aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from storefront.domain.exceptions import ValidationError

PATCHABLE_FIELDS = frozenset({"name", "description"})


@dataclass
class Category:
    """A product category.

    Name uniqueness is enforced by the repository at write time, not here:
    only the store can see every other category.
    """

    id: str | None
    name: str
    description: str = ""
    creator_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        name: str,
        description: str | None = None,
        creator_id: str | None = None,
    ) -> Category:
        return Category(
            id=None,
            name=_clean_name(name),
            description=(description or "").strip(),
            creator_id=creator_id,
        )

    def apply_changes(self, changes: dict[str, Any]) -> None:
        unknown = set(changes) - PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Cannot update field(s): {', '.join(sorted(unknown))}"
            )
        if "name" in changes:
            self.name = _clean_name(changes["name"])
        if "description" in changes:
            self.description = (changes["description"] or "").strip()


def _clean_name(name: str | None) -> str:
    if not name or not name.strip():
        raise ValidationError("Category name is required")
    return name.strip()
