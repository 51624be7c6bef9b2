"""API routes for the caller's challenges.

Provides the My Challenges listing and its total count. Filters arrive as
one ``filter`` query parameter (see ``direct_api.query.filter_parser``);
ordering and paging as ``orderBy``, ``sortOrder``, ``limit`` and ``offset``.

All endpoints use /api/v1/challenges prefix.
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from direct_api.api.auth import get_identity
from direct_api.api.schemas import ChallengeCountResponse, ChallengeListResponse
from direct_api.config import get_config
from direct_api.db import CatalogDAO, ChallengeDAO, UserDAO
from direct_api.db.connection import get_db
from direct_api.errors import BadRequestError
from direct_api.query import parse_filter
from direct_api.query.models import LimitQuery, OrderSpec, QueryParameter, SortOrder
from direct_api.query.values import parse_int
from direct_api.security import AccessLevel, Identity
from direct_api.services import ChallengeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/challenges", tags=["challenges"])

_SORT_SHORTHANDS = {
    "asc": SortOrder.ASC_NULLS_FIRST,
    "desc": SortOrder.DESC_NULLS_LAST,
}


def get_challenge_service(db: Session = Depends(get_db)) -> ChallengeService:
    """Build the challenge service over a request-scoped session."""
    config = get_config()
    return ChallengeService(
        ChallengeDAO(db),
        CatalogDAO(db),
        UserDAO(db),
        config.query,
        allowed_levels=tuple(AccessLevel(level) for level in config.auth.allowed_levels),
    )


def get_authorized_identity(
    identity: Identity = Depends(get_identity),
    service: ChallengeService = Depends(get_challenge_service),
) -> Identity:
    """Resolve the caller and check its access level before any parsing."""
    service.authorize(identity)
    return identity


def parse_sort_order(raw: str | None) -> SortOrder | None:
    """Map ``asc``/``desc`` or a full SortOrder name to a SortOrder.

    Raises:
        BadRequestError: If the value names no known sort order.
    """
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    if value.lower() in _SORT_SHORTHANDS:
        return _SORT_SHORTHANDS[value.lower()]
    try:
        return SortOrder[value.upper()]
    except KeyError:
        raise BadRequestError.from_code("E-2010", sort_order=value) from None


def parse_paging(limit: str | None, offset: str | None) -> LimitQuery | None:
    """Parse paging parameters; non-integers are rejected like bad values.

    Raises:
        BadRequestError: If limit or offset is not an integer.
    """
    if limit is None and offset is None:
        return None
    parsed_limit = parse_int(limit) if limit is not None else None
    if limit is not None and parsed_limit is None:
        raise BadRequestError.from_code("E-2007")
    parsed_offset = parse_int(offset) if offset is not None else None
    if offset is not None and parsed_offset is None:
        raise BadRequestError.from_code("E-2008")
    return LimitQuery(limit=parsed_limit, offset=parsed_offset)


@router.get("", response_model=ChallengeListResponse)
def list_challenges(
    filter: str | None = Query(None, description="Encoded filter string"),
    order_by: str | None = Query(None, alias="orderBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    identity: Identity = Depends(get_authorized_identity),
    service: ChallengeService = Depends(get_challenge_service),
) -> ChallengeListResponse:
    """List the caller's challenges with prize data.

    Args:
        filter: ``key=value&key=v1,v2`` filter string.
        order_by: Public sort field name.
        sort_order: ``asc``, ``desc`` or a SortOrder name.
        limit: Page size; -1 returns every row.
        offset: Rows to skip.
        identity: Caller identity (injected).
        service: Challenge service (injected).

    Returns:
        The requested page of challenges.
    """
    query = QueryParameter(
        filter=parse_filter(filter),
        order=OrderSpec(field=order_by, sort_order=parse_sort_order(sort_order)),
        limit=parse_paging(limit, offset),
    )
    return ChallengeListResponse(challenges=service.get_challenges(identity, query))


@router.get("/count", response_model=ChallengeCountResponse)
def count_challenges(
    filter: str | None = Query(None, description="Encoded filter string"),
    identity: Identity = Depends(get_authorized_identity),
    service: ChallengeService = Depends(get_challenge_service),
) -> ChallengeCountResponse:
    """Count the caller's challenges matching the filters."""
    query = QueryParameter(filter=parse_filter(filter))
    return ChallengeCountResponse(total_count=service.get_challenge_count(identity, query))
