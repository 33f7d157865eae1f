"""
Persisted-state collaborator used by the booking core.

A ``Store`` wraps one SQLAlchemy session. Core operations receive it as an
argument instead of reaching for a module-level session.
"""

from typing import Any, Iterable, List, Optional, Type, TypeVar

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.db import get_db

ModelType = TypeVar("ModelType")


class Store:
    """create / find_by_id / find_many / count / save over a session.

    Writes commit immediately; a failed commit is rolled back before the
    error propagates so nothing half-written stays in the session.
    """

    def __init__(self, session: Session):
        self.session = session

    def create(self, entity: ModelType) -> ModelType:
        self.session.add(entity)
        self._commit()
        self.session.refresh(entity)
        return entity

    def find_by_id(self, model: Type[ModelType], id_: Any) -> Optional[ModelType]:
        if id_ is None:
            return None
        return self.session.get(model, id_)

    def find_first(self, model: Type[ModelType], *criteria) -> Optional[ModelType]:
        stmt = select(model).where(*criteria).limit(1)
        return self.session.execute(stmt).scalars().first()

    def find_many(
        self,
        model: Type[ModelType],
        *criteria,
        order_by: Iterable[Any] = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        stmt = select(model).where(*criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if skip:
            stmt = stmt.offset(skip)
        if limit:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def count(self, model: Type[ModelType], *criteria) -> int:
        stmt = select(func.count()).select_from(model).where(*criteria)
        return self.session.execute(stmt).scalar_one()

    def save(self, entity: ModelType, **changes) -> ModelType:
        """Apply ``changes`` to ``entity`` and persist it."""
        for key, value in changes.items():
            setattr(entity, key, value)
        self.session.add(entity)
        self._commit()
        self.session.refresh(entity)
        return entity

    def _commit(self):
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise


def get_store(db: Session = Depends(get_db)) -> Store:
    """Provide a store bound to the request's database session."""
    return Store(db)
