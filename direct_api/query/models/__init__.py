"""Data models for the challenge query pipeline."""

from direct_api.query.models.challenge import Challenge, Prize, PrizeType
from direct_api.query.models.filter import (
    CompiledQuery,
    FilterSet,
    LimitQuery,
    OrderSpec,
    QueryParameter,
    SortOrder,
)

__all__ = [
    "Challenge",
    "Prize",
    "PrizeType",
    "CompiledQuery",
    "FilterSet",
    "LimitQuery",
    "OrderSpec",
    "QueryParameter",
    "SortOrder",
]
