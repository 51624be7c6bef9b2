"""Lookup catalog access: translates names to ids per lookup category."""

import logging
from dataclasses import dataclass

from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from direct_api.errors import DataAccessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogTable:
    """Where a lookup category lives.

    Attributes:
        table: Lookup table name.
        id_column: Identifier column returned.
        name_column: Column matched case-insensitively against names.
        condition: Extra SQL restricting the category's rows.
    """

    table: str
    id_column: str
    name_column: str
    condition: str | None = None


CATALOG_TABLES: dict[str, CatalogTable] = {
    "challenge_type": CatalogTable("project_category_lu", "project_category_id", "name"),
    "technology": CatalogTable("technology_types", "technology_type_id", "technology_name"),
    "platform": CatalogTable("project_platform_lu", "project_platform_id", "name"),
    "project_status": CatalogTable("project_status_lu", "project_status_id", "name"),
    # Every status that is neither active nor draft.
    "draft_project_status": CatalogTable(
        "project_status_lu", "project_status_id", "name", "project_status_id NOT IN (1, 2)"
    ),
}


class CatalogDAO:
    """Reads identifier sets from the lookup tables."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_ids(self, category: str, names: list[str] | None) -> list[int]:
        """Return the ids of ``category`` entries matching ``names``.

        Names match case-insensitively. ``None`` returns every id of the
        category; an empty list returns no ids.

        Raises:
            ValueError: If the category is unknown.
            DataAccessError: If the query fails.
        """
        catalog = CATALOG_TABLES.get(category)
        if catalog is None:
            raise ValueError(f"Unknown lookup category: {category}")
        if names is not None and not names:
            return []

        conditions = []
        if catalog.condition:
            conditions.append(catalog.condition)
        if names is not None:
            conditions.append(f"LOWER({catalog.name_column}) IN :names")
        sql = f"SELECT {catalog.id_column} FROM {catalog.table}"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += f" ORDER BY {catalog.id_column}"

        stmt = text(sql)
        if names is not None:
            stmt = stmt.bindparams(
                bindparam("names", value=[n.lower() for n in names], expanding=True)
            )
        try:
            ids = list(self._db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.error("Lookup of %s failed: %s", category, e)
            raise DataAccessError(f"get_ids({category})") from e
        logger.debug("Resolved %s %s to %d id(s)", category, names, len(ids))
        return ids
