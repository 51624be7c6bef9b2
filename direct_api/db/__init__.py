"""Database module for the Direct API reference schema and data access."""

from direct_api.db.catalog_dao import CATALOG_TABLES, CatalogDAO, CatalogTable
from direct_api.db.challenge_dao import ChallengeDAO
from direct_api.db.models import Base, PhaseType, ProjectInfoType
from direct_api.db.user_dao import UserDAO

__all__ = [
    # Models
    "Base",
    "PhaseType",
    "ProjectInfoType",
    # Data access
    "CATALOG_TABLES",
    "CatalogDAO",
    "CatalogTable",
    "ChallengeDAO",
    "UserDAO",
]
