"""Challenge data access: executes compiled challenge queries.

The filter compiler produces ``AND ...`` fragments and named parameters;
this module supplies the base query they attach to. Fragments reference
these aliases of the base query:

    p                    project
    psl                  project_status_lu
    pi1                  project_info holding the component version id
    reg_phase            registration phase of the challenge
    client_billing_info  billing account joined with its client

Every query is restricted to direct projects the caller (``:user_id``) holds
a permission grant on.

Example:
    with get_db_context() as db:
        dao = ChallengeDAO(db)
        rows = dao.get_my_challenges(fragments, params, "ORDER BY challenge_id")
"""

import logging
import re
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from direct_api.db.models import PhaseType, ProjectInfoType
from direct_api.errors import DataAccessError
from direct_api.query.models import Challenge, Prize

logger = logging.getLogger(__name__)

_PARAM_PATTERN = re.compile(r"(?<![:\w]):([A-Za-z_][A-Za-z0-9_]*)")

CHALLENGE_COLUMNS = """
SELECT
    p.project_id AS challenge_id,
    pn.value AS challenge_name,
    pcl.name AS challenge_type,
    psl.name AS challenge_status,
    creator.handle AS challenge_creator,
    COALESCE(reg_phase.actual_start_time, reg_phase.scheduled_start_time)
        AS challenge_start_date,
    (SELECT COALESCE(MAX(ep.actual_end_time), MAX(ep.scheduled_end_time))
        FROM project_phase ep WHERE ep.project_id = p.project_id) AS challenge_end_date,
    client_billing_info.client_id AS client_id,
    client_billing_info.client_name AS client_name,
    client_billing_info.billing_id AS billing_id,
    client_billing_info.billing_name AS billing_name,
    p.tc_direct_project_id AS direct_project_id,
    tcdp.name AS direct_project_name,
    CAST(pdr.value AS DOUBLE PRECISION) AS dr_points
"""

CHALLENGE_FROM = f"""
FROM project p
JOIN project_status_lu psl ON psl.project_status_id = p.project_status_id
JOIN project_category_lu pcl ON pcl.project_category_id = p.project_category_id
LEFT JOIN project_info pn
    ON pn.project_id = p.project_id
    AND pn.project_info_type_id = {ProjectInfoType.project_name.value}
LEFT JOIN project_info pi1
    ON pi1.project_id = p.project_id
    AND pi1.project_info_type_id = {ProjectInfoType.component_version.value}
LEFT JOIN project_info pdr
    ON pdr.project_id = p.project_id
    AND pdr.project_info_type_id = {ProjectInfoType.dr_points.value}
LEFT JOIN project_info pbill
    ON pbill.project_id = p.project_id
    AND pbill.project_info_type_id = {ProjectInfoType.billing_project.value}
LEFT JOIN (
    SELECT ba.billing_id, ba.name AS billing_name, c.client_id, c.name AS client_name
    FROM billing_account ba
    JOIN client c ON c.client_id = ba.client_id
) client_billing_info ON client_billing_info.billing_id = CAST(pbill.value AS INTEGER)
LEFT JOIN project_phase reg_phase
    ON reg_phase.project_id = p.project_id
    AND reg_phase.project_phase_id = (
        SELECT MIN(rp.project_phase_id) FROM project_phase rp
        WHERE rp.project_id = p.project_id
        AND rp.phase_type_id = {PhaseType.registration.value}
    )
LEFT JOIN tc_direct_project tcdp ON tcdp.project_id = p.tc_direct_project_id
LEFT JOIN "user" creator ON creator.user_id = p.create_user
WHERE EXISTS (
    SELECT 1 FROM user_permission_grant upg
    WHERE upg.resource_id = p.tc_direct_project_id AND upg.user_id = :user_id
)
"""

PRIZE_QUERY = """
SELECT
    pr.project_id AS challenge_id,
    pr.prize_type_id AS prize_type,
    pr.prize_amount AS prize_amount,
    pr.number_of_submissions AS number_of_prize,
    pr.place AS placement
FROM prize pr
WHERE pr.project_id IN :challenge_ids
ORDER BY pr.project_id, pr.prize_type_id, pr.place
"""


def _bind(sql: str, params: dict[str, Any]):
    """Build a text() statement binding only the parameters the SQL uses.

    Sequences bind as expanding IN lists and datetimes as DateTime values.
    An expanding parameter renders its own parentheses, so ``IN (:name)``
    is reduced to ``IN :name`` first.
    """
    names = dict.fromkeys(_PARAM_PATTERN.findall(sql))
    binds = []
    for name in names:
        value = params.get(name)
        if isinstance(value, (list, tuple, set)):
            sql = re.sub(rf"\(\s*:{name}\s*\)", f":{name}", sql)
            binds.append(bindparam(name, value=list(value), expanding=True))
        elif isinstance(value, datetime):
            binds.append(bindparam(name, value=value, type_=DateTime()))
        else:
            binds.append(bindparam(name, value=value))
    return text(sql).bindparams(*binds)


class ChallengeDAO:
    """Executes challenge list, count and prize queries."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_my_challenges(
        self, filters: list[str], params: dict[str, Any], order_clause: str
    ) -> list[Challenge]:
        """Fetch one page of challenges.

        Args:
            filters: Compiled ``AND ...`` fragments.
            params: Bound values, including ``user_id``, ``offset`` and,
                for bounded pages, ``limit``.
            order_clause: Complete ORDER BY clause.

        Raises:
            DataAccessError: If the query fails.
        """
        sql = "\n".join(
            [CHALLENGE_COLUMNS, CHALLENGE_FROM, *filters, order_clause, self._paging(params)]
        )
        stmt = _bind(sql, params).columns(
            challenge_start_date=DateTime(), challenge_end_date=DateTime()
        )
        try:
            rows = self._db.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            logger.error("Challenge query failed: %s", e)
            raise DataAccessError("get_my_challenges") from e

        challenges = []
        for row in rows:
            values = dict(row)
            values["id"] = values.pop("challenge_id")
            challenges.append(Challenge.model_validate(values))
        logger.debug("Challenge query returned %d row(s)", len(challenges))
        return challenges

    def get_my_challenges_count(self, filters: list[str], params: dict[str, Any]) -> int | None:
        """Count challenges matching the fragments, ignoring paging.

        Raises:
            DataAccessError: If the query fails.
        """
        sql = "\n".join(
            ["SELECT COUNT(DISTINCT p.project_id) AS total_count", CHALLENGE_FROM, *filters]
        )
        try:
            return self._db.execute(_bind(sql, params)).scalar()
        except SQLAlchemyError as e:
            logger.error("Challenge count query failed: %s", e)
            raise DataAccessError("get_my_challenges_count") from e

    def get_my_challenges_prizes(self, challenge_ids: list[int]) -> list[Prize]:
        """Fetch every prize of the given challenges in one query.

        Raises:
            DataAccessError: If the query fails.
        """
        if not challenge_ids:
            return []
        try:
            rows = self._db.execute(
                _bind(PRIZE_QUERY, {"challenge_ids": challenge_ids})
            ).mappings().all()
        except SQLAlchemyError as e:
            logger.error("Prize query failed: %s", e)
            raise DataAccessError("get_my_challenges_prizes") from e
        return [Prize.model_validate(dict(row)) for row in rows]

    def _paging(self, params: dict[str, Any]) -> str:
        if "limit" in params:
            return "LIMIT :limit OFFSET :offset"
        if not params.get("offset"):
            return ""
        # SQLite requires a LIMIT before OFFSET.
        if self._db.get_bind().dialect.name == "sqlite":
            return "LIMIT -1 OFFSET :offset"
        return "OFFSET :offset"
