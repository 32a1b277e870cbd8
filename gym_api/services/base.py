import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gym_api.core.exceptions import PersistenceError


class BaseService:
    """Holds the request's DB session and a logger named after the concrete service."""

    def __init__(self, db: Session):
        self.db = db
        self._logger = logging.getLogger(f"gym_api.services.{self.__class__.__name__}")

    def log_info(self, message: str, **extra):
        self._logger.info(message, extra=extra or None)

    def log_warning(self, message: str, **extra):
        self._logger.warning(message, extra=extra or None)

    def commit(self, *entities) -> None:
        """
        Commit the unit of work and refresh `entities`.
        On failure the session is rolled back and a PersistenceError is raised.
        """
        try:
            self.db.commit()
            for entity in entities:
                self.db.refresh(entity)
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"Commit failed: {e}", exc_info=True)
            raise PersistenceError() from e
