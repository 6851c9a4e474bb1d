"""
Generic repository + unit of work over a SQLAlchemy session.

Repositories only stage changes; UnitOfWork.complete() is the single place
that commits.
"""

from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from talentos.db.models import Department, EducationLevel, Employee, Position

T = TypeVar("T")


class GenericRepository(Generic[T]):

    def __init__(self, session: Session, model: Type[T]):
        self.session = session
        self.model = model

    def get_by_id(self, entity_id: int) -> Optional[T]:
        return self.session.get(self.model, entity_id)

    def get_all(self, *options) -> List[T]:
        """All rows by id; `options` are loader options such as selectinload(...)."""
        stmt = select(self.model).order_by(self.model.id)
        if options:
            stmt = stmt.options(*options)
        return list(self.session.scalars(stmt))

    def find(self, *criteria) -> List[T]:
        """Rows matching all SQLAlchemy criteria, e.g. find(Employee.email == email)."""
        return list(self.session.scalars(select(self.model).where(*criteria).order_by(self.model.id)))

    def first(self, *criteria) -> Optional[T]:
        return self.session.scalars(select(self.model).where(*criteria).limit(1)).first()

    def exists(self, *criteria) -> bool:
        return self.first(*criteria) is not None

    def add(self, entity: T) -> T:
        self.session.add(entity)
        return entity

    def update(self, entity: T) -> T:
        # Attached instances are tracked already; merge covers detached ones
        if entity not in self.session:
            entity = self.session.merge(entity)
        return entity

    def remove(self, entity: T) -> None:
        self.session.delete(entity)

    def count(self, *criteria) -> int:
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        return self.session.scalar(stmt) or 0


class UnitOfWork:
    """Groups the four repositories around one session."""

    def __init__(self, session: Session):
        self.session = session
        self.employees: GenericRepository[Employee] = GenericRepository(session, Employee)
        self.departments: GenericRepository[Department] = GenericRepository(session, Department)
        self.positions: GenericRepository[Position] = GenericRepository(session, Position)
        self.education_levels: GenericRepository[EducationLevel] = GenericRepository(session, EducationLevel)

    def repository_for(self, model: Type[T]) -> GenericRepository[T]:
        return {
            Employee: self.employees,
            Department: self.departments,
            Position: self.positions,
            EducationLevel: self.education_levels,
        }[model]

    def complete(self) -> None:
        """Commit every pending change in one transaction."""
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
