from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.orm import Query, Session, selectinload

from webapp.core.errors import EmptyFilterError, InvalidIdentifierError, InvalidPaginationError
from webapp.schemas.common import PaginatedResult
from webapp.schemas.filters import PropertyFilter, SortOrder
from webapp.services.predicates import build_ordering, build_predicates

_LOG = logging.getLogger("webapp.repository")


@dataclass
class WriteResult:
    ok: bool
    entity: Any = None
    error: Exception | None = None

    def __bool__(self) -> bool:
        return self.ok


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _primary_key(model):
    return sa_inspect(model).primary_key[0]


class GenericRepository:
    def __init__(self, db: Session):
        if db is None:
            raise ValueError("Session cannot be None")
        self.db = db

    def _include_options(self, model, includes: Sequence[str] | None) -> list:
        if not includes:
            return []
        relationships = {rel.key.lower(): rel.key for rel in sa_inspect(model).relationships}
        options = []
        seen: set[str] = set()
        for including in includes:
            key = relationships.get(str(including or "").strip().lower())
            if key is None:
                _LOG.warning("Navigation property '%s' does not exist on entity '%s'.", including, model.__name__)
                continue
            if key in seen:
                continue
            seen.add(key)
            options.append(selectinload(getattr(model, key)))
        return options

    def _filtered(self, model, filters: Sequence[PropertyFilter]) -> Query:
        q = self.db.query(model)
        for clause in build_predicates(model, filters):
            q = q.filter(clause)
        return q

    def _ordered(self, q: Query, model, filters: Sequence[PropertyFilter], order: int, *, stable: bool) -> Query:
        ordering = build_ordering(model, filters, order)
        if ordering is not None:
            # Ties on the sort key fall back to insertion order.
            return q.order_by(ordering, _primary_key(model).asc())
        if stable:
            return q.order_by(_primary_key(model).asc())
        return q

    @staticmethod
    def _check_page(page_number, page_size) -> None:
        if not _is_positive_int(page_number) or not _is_positive_int(page_size):
            raise InvalidPaginationError(page_number, page_size)

    def get_by_id(self, model, entity_id: int, includes: Sequence[str] | None = None):
        if not _is_positive_int(entity_id):
            raise InvalidIdentifierError(entity_id)
        _LOG.info("Fetching entity of type %s with ID %s", model.__name__, entity_id)
        q = self.db.query(model).options(*self._include_options(model, includes))
        entity = q.filter(_primary_key(model) == entity_id).first()
        if entity is None:
            _LOG.warning("Entity of type %s with ID %s not found", model.__name__, entity_id)
        return entity

    def get_all(self, model, includes: Sequence[str] | None = None) -> list:
        _LOG.info("Fetching all entities of type %s", model.__name__)
        q = self.db.query(model).options(*self._include_options(model, includes))
        entities = q.all()
        if not entities:
            _LOG.warning("No entities of type %s found", model.__name__)
        return entities

    def get_paginated(
        self,
        model,
        page_number: int,
        page_size: int,
        includes: Sequence[str] | None = None,
    ) -> PaginatedResult:
        self._check_page(page_number, page_size)
        _LOG.info("Fetching page %s (size %s) of %s", page_number, page_size, model.__name__)
        total_count = self.db.query(model).count()
        items = (
            self.db.query(model)
            .options(*self._include_options(model, includes))
            .order_by(_primary_key(model).asc())
            .offset((page_number - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return PaginatedResult(items=items, total_count=total_count)

    def find_by_filters(self, model, filters: Sequence[PropertyFilter], includes: Sequence[str] | None = None):
        filters = list(filters or [])
        if all(item.is_blank for item in filters):
            raise EmptyFilterError()
        q = self._filtered(model, filters).options(*self._include_options(model, includes))
        entity = q.order_by(_primary_key(model).asc()).first()
        if entity is None:
            _LOG.warning("No entity of type %s found with the specified condition", model.__name__)
        return entity

    def filter_by_filters(
        self,
        model,
        filters: Sequence[PropertyFilter],
        order: int = SortOrder.ASC,
        includes: Sequence[str] | None = None,
    ) -> list:
        filters = list(filters or [])
        q = self._filtered(model, filters).options(*self._include_options(model, includes))
        entities = self._ordered(q, model, filters, order, stable=False).all()
        if not entities:
            _LOG.warning("No entities of type %s found with the specified condition", model.__name__)
        return entities

    def filter_paginated(
        self,
        model,
        filters: Sequence[PropertyFilter],
        page_number: int,
        page_size: int,
        order: int = SortOrder.ASC,
        includes: Sequence[str] | None = None,
    ) -> PaginatedResult:
        self._check_page(page_number, page_size)
        filters = list(filters or [])
        base = self._filtered(model, filters)
        total_count = base.count()
        q = self._ordered(base.options(*self._include_options(model, includes)), model, filters, order, stable=True)
        items = q.offset((page_number - 1) * page_size).limit(page_size).all()
        return PaginatedResult(items=items, total_count=total_count)

    def _write(self, entity, action: str, apply) -> WriteResult:
        if entity is None:
            _LOG.error("Attempted to %s a null entity", action)
            raise ValueError("Entity cannot be None")
        entity_name = type(entity).__name__
        try:
            persistent = apply(entity)
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            _LOG.exception("Error during %s of entity of type %s", action, entity_name)
            return WriteResult(ok=False, error=exc)
        _LOG.info("Entity of type %s: %s succeeded", entity_name, action)
        return WriteResult(ok=True, entity=persistent)

    def _apply_add(self, entity):
        self.db.add(entity)
        return entity

    def _apply_update(self, entity):
        return self.db.merge(entity)

    def _apply_delete(self, entity):
        persistent = self.db.merge(entity)
        self.db.delete(persistent)
        return persistent

    def add(self, entity) -> WriteResult:
        return self._write(entity, "create", self._apply_add)

    def update(self, entity) -> WriteResult:
        return self._write(entity, "update", self._apply_update)

    def delete(self, entity) -> WriteResult:
        return self._write(entity, "delete", self._apply_delete)
