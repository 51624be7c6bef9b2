"""Request-side models for the challenge query pipeline.

FilterSet (parsed caller filters) → CompiledQuery (SQL fragments plus bound
parameters). OrderSpec and LimitQuery carry sorting and paging. All models
are Pydantic v2 and live for a single request.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

_PARAM_REF = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


class SortOrder(str, Enum):
    """Sort directions a caller may request.

    Only ASC_NULLS_FIRST and DESC_NULLS_LAST are supported by the compiler;
    the other two exist so that an explicit unsupported request can be
    reported rather than silently coerced.
    """

    ASC_NULLS_FIRST = "ASC_NULLS_FIRST"
    ASC_NULLS_LAST = "ASC_NULLS_LAST"
    DESC_NULLS_FIRST = "DESC_NULLS_FIRST"
    DESC_NULLS_LAST = "DESC_NULLS_LAST"


class FilterSet(BaseModel):
    """Named, possibly multi-valued caller filters.

    Keys are case-insensitive; insertion order is kept. Keys outside the
    recognized vocabulary are carried but ignored by the compiler.
    """

    entries: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("entries", mode="before")
    @classmethod
    def _normalize_entries(cls, v: Any) -> dict[str, list[str]]:
        """Fold keys to lower case and wrap scalar values in lists."""
        if v is None:
            return {}
        normalized: dict[str, list[str]] = {}
        for key, raw in dict(v).items():
            values = [raw] if isinstance(raw, str) else list(raw or [])
            normalized.setdefault(str(key).lower(), []).extend(str(x) for x in values)
        return normalized

    @classmethod
    def of(cls, **filters: str | list[str]) -> FilterSet:
        """Build a FilterSet from keyword arguments."""
        return cls(entries=filters)

    def contains(self, key: str) -> bool:
        """Return True when the filter key is present."""
        return key.lower() in self.entries

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> list[str]:
        return list(self.entries)

    def values(self, key: str, lower: bool = False) -> list[str]:
        """Return the trimmed values of a filter, optionally lower-cased."""
        values = [v.strip() for v in self.entries.get(key.lower(), [])]
        if lower:
            return [v.lower() for v in values]
        return values

    def first(self, key: str, lower: bool = False) -> str | None:
        """Return the first value of a filter, or None when absent/empty."""
        values = self.values(key, lower=lower)
        return values[0] if values else None


class CompiledQuery(BaseModel):
    """Ordered AND-fragments plus the parameters they reference.

    Every ``:name`` a fragment references must exist in ``params``.
    """

    fragments: list[str] = Field(default_factory=list)
    params: dict[str, Any] = Field(default_factory=dict)

    def bind(self, name: str, value: Any) -> str:
        """Record a parameter and return its placeholder."""
        self.params[name] = value
        return f":{name}"

    def add(self, fragment: str) -> None:
        """Append a self-contained ``AND ...`` fragment."""
        self.fragments.append(fragment)

    def extend(self, other: CompiledQuery) -> None:
        """Append another compiled query's fragments and parameters."""
        self.fragments.extend(other.fragments)
        self.params.update(other.params)

    def referenced_parameters(self) -> set[str]:
        """Return every parameter name referenced by the fragments."""
        names: set[str] = set()
        for fragment in self.fragments:
            names.update(_PARAM_REF.findall(fragment))
        return names

    def unbound_parameters(self) -> set[str]:
        """Return referenced parameter names missing from ``params``."""
        return self.referenced_parameters() - set(self.params)


class OrderSpec(BaseModel):
    """Requested sort field and direction (either may be omitted)."""

    field: str | None = None
    sort_order: SortOrder | None = None


class LimitQuery(BaseModel):
    """Requested page size and offset (either may be omitted)."""

    limit: int | None = None
    offset: int | None = None


class QueryParameter(BaseModel):
    """Everything a caller sends to the listing and count operations."""

    filter: FilterSet = Field(default_factory=FilterSet)
    order: OrderSpec = Field(default_factory=OrderSpec)
    limit: LimitQuery | None = None
