"""
Dimension Resolver - get-or-create for departments, positions and
education levels by free-text name.

- Case-insensitive exact match on the trimmed name
- Miss -> insert and commit right away, so the id is durable
- Resolved ids are memoized per resolver (one per request/import)
- The lower(name) unique index makes the insert safe against a concurrent
  insert of the same name: the IntegrityError is absorbed by re-reading
"""

import logging
from typing import Dict, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from talentos.core.errors import ValidationError
from talentos.db.models import DIMENSION_MODELS
from talentos.db.repository import UnitOfWork

logger = logging.getLogger(__name__)

# Fallback names for blank input; education level has none (callers skip it)
DEFAULT_NAMES = {
    "department": "General",
    "position": "Sin asignar",
}


class DimensionResolver:

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self._ids: Dict[Tuple[str, str], int] = {}

    def resolve(self, kind: str, name: str) -> int:
        """Return the id of the `kind` row named `name`, creating it on miss."""
        if kind not in DIMENSION_MODELS:
            raise ValueError(f"Unknown dimension kind '{kind}'")

        name = (name or "").strip()
        if not name:
            if kind not in DEFAULT_NAMES:
                raise ValidationError(f"A {kind.replace('_', ' ')} name is required.")
            name = DEFAULT_NAMES[kind]

        key = (kind, name.lower())
        if key in self._ids:
            return self._ids[key]

        model = DIMENSION_MODELS[kind]
        repo = self.uow.repository_for(model)

        row = repo.first(func.lower(model.name) == name.lower())
        if row is None:
            row = self._insert_if_absent(model, name)

        self._ids[key] = row.id
        return row.id

    def resolve_department(self, name: str) -> int:
        return self.resolve("department", name)

    def resolve_position(self, name: str) -> int:
        return self.resolve("position", name)

    def resolve_education_level(self, name: str) -> int:
        return self.resolve("education_level", name)

    def _insert_if_absent(self, model, name: str):
        repo = self.uow.repository_for(model)
        try:
            row = repo.add(model(name=name))
            self.uow.complete()
            logger.info("Created %s '%s' (id=%s)", model.__tablename__, name, row.id)
            return row
        except IntegrityError:
            # Someone else inserted the same name (any casing) first
            self.uow.rollback()
            existing = repo.first(func.lower(model.name) == name.lower())
            if existing is None:
                raise
            return existing
