"""User lookups needed by filter validation."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from direct_api.db.models import User
from direct_api.errors import DataAccessError

logger = logging.getLogger(__name__)


class UserDAO:
    """Reads user records."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_user_handle(self, user_id: int) -> str | None:
        """Return the handle of ``user_id``, or None if the user is unknown.

        Raises:
            DataAccessError: If the query fails.
        """
        try:
            user = self._db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Handle lookup for user %s failed: %s", user_id, e)
            raise DataAccessError("get_user_handle") from e
        return user.handle if user is not None else None
