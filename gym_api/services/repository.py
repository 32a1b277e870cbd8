"""
Generic persistence collaborator.

Each workflow service talks to storage only through find_many / find_by_id /
create / update / delete. Storage failures surface as PersistenceError with
the original SQLAlchemy error chained.
"""
import logging
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gym_api.core.exceptions import NotFoundError, PersistenceError

ModelT = TypeVar("ModelT")

logger = logging.getLogger(__name__)


class Repository(Generic[ModelT]):
    def __init__(self, db: Session, model: Type[ModelT], label: Optional[str] = None):
        self.db = db
        self.model = model
        self.label = label or model.__name__

    def query(self):
        return self.db.query(self.model)

    def find_many(
        self,
        filters: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
    ) -> List[ModelT]:
        query = self.query()
        if filters:
            query = query.filter(*filters)
        if order_by:
            query = query.order_by(*order_by)
        else:
            query = query.order_by(self.model.id.asc())
        try:
            return query.all()
        except SQLAlchemyError as e:
            logger.error(f"Query on {self.label} failed: {e}")
            raise PersistenceError() from e

    def find_by_id(self, entity_id: int) -> ModelT:
        try:
            entity = self.db.get(self.model, entity_id)
        except SQLAlchemyError as e:
            logger.error(f"Lookup of {self.label} {entity_id} failed: {e}")
            raise PersistenceError() from e
        if entity is None:
            raise NotFoundError(self.label, entity_id)
        return entity

    def create(self, data: Dict[str, Any], commit: bool = True) -> ModelT:
        entity = self.model(**data)
        self.db.add(entity)
        self._flush_or_commit(commit, entity)
        return entity

    def update(self, entity: ModelT, data: Dict[str, Any], commit: bool = True) -> ModelT:
        for key, value in data.items():
            setattr(entity, key, value)
        self._flush_or_commit(commit, entity)
        return entity

    def delete(self, entity: ModelT, commit: bool = True) -> None:
        self.db.delete(entity)
        self._flush_or_commit(commit)

    def _flush_or_commit(self, commit: bool, entity: Optional[ModelT] = None) -> None:
        try:
            if commit:
                self.db.commit()
                if entity is not None:
                    self.db.refresh(entity)
            else:
                self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Write to {self.label} failed: {e}", exc_info=True)
            raise PersistenceError() from e
