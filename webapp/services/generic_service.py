from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Sequence, TypeVar

from pydantic import BaseModel

from webapp.core.errors import (
    InvalidIdentifierError,
    MappingError,
    NotFoundError,
    UnsupportedOperatorError,
    ValidationError,
)
from webapp.core.messages import ResponseStatusCode
from webapp.schemas.common import ApiResponse, PaginatedResult
from webapp.schemas.filters import FilterQuery, PropertyFilter, SortOrder
from webapp.services.generic_repository import GenericRepository

_LOG = logging.getLogger("webapp.service")

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    data: T
    outcome: ResponseStatusCode = ResponseStatusCode.OK
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.outcome.is_success

    def to_response(self) -> ApiResponse:
        return ApiResponse(message=self.outcome, data=self.data)


def _resolve_mapper(mapper) -> Callable[[Any], Any]:
    if isinstance(mapper, type) and issubclass(mapper, BaseModel):
        return lambda entity: mapper.model_validate(entity, from_attributes=True)
    if callable(mapper):
        return mapper
    raise TypeError(f"Mapper must be a pydantic model class or a callable, got {mapper!r}")


def _empty_page() -> PaginatedResult:
    return PaginatedResult(items=[], total_count=0)


class GenericService:
    """Reads and writes one entity type, mapping rows to view models.

    Every call returns a ServiceResult instead of raising: the outcome tells
    "found nothing" (NOT_FOUND) apart from "invalid request" (BAD_REQUEST) and
    "store or code failure" (INTERNAL_SERVER_ERROR). Unsupported filter
    operators are programming errors and propagate.
    """

    def __init__(self, repository: GenericRepository, model, mapper):
        self.repository = repository
        self.model = model
        self._map = _resolve_mapper(mapper)

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    def _run(self, empty: Callable[[], Any], action: Callable[[], ServiceResult], message: str, *args) -> ServiceResult:
        try:
            return action()
        except UnsupportedOperatorError:
            raise
        except ValidationError as exc:
            _LOG.warning("Rejected request for %s: %s", self.entity_name, exc)
            return ServiceResult(empty(), ResponseStatusCode.BAD_REQUEST, exc)
        except Exception as exc:
            _LOG.exception(message, self.entity_name, *args)
            return ServiceResult(empty(), ResponseStatusCode.INTERNAL_SERVER_ERROR, exc)

    def _single(self, entity, not_found: str) -> ServiceResult:
        if entity is None:
            return ServiceResult(None, ResponseStatusCode.NOT_FOUND, NotFoundError(not_found))
        mapped = self._map(entity)
        if mapped is None:
            return ServiceResult(None, ResponseStatusCode.BAD_REQUEST, MappingError(f"Could not map {self.entity_name}"))
        return ServiceResult(mapped)

    def _many(self, entities: list) -> ServiceResult:
        if not entities:
            return ServiceResult([], ResponseStatusCode.NOT_FOUND, NotFoundError(f"No {self.entity_name} rows found"))
        mapped = [self._map(entity) for entity in entities]
        if any(item is None for item in mapped):
            return ServiceResult([], ResponseStatusCode.BAD_REQUEST, MappingError(f"Could not map {self.entity_name}"))
        return ServiceResult(mapped)

    def _page(self, page: PaginatedResult) -> ServiceResult:
        if not page.items:
            return ServiceResult(_empty_page(), ResponseStatusCode.NOT_FOUND, NotFoundError(f"No {self.entity_name} rows found"))
        mapped = [self._map(entity) for entity in page.items]
        if any(item is None for item in mapped):
            return ServiceResult(_empty_page(), ResponseStatusCode.BAD_REQUEST, MappingError(f"Could not map {self.entity_name}"))
        return ServiceResult(PaginatedResult(items=mapped, total_count=page.total_count))

    def get_by_id(self, entity_id: int, includes: Sequence[str] | None = None) -> ServiceResult:
        if not isinstance(entity_id, int) or isinstance(entity_id, bool) or entity_id <= 0:
            return ServiceResult(None, ResponseStatusCode.BAD_REQUEST, InvalidIdentifierError(entity_id))

        def action():
            entity = self.repository.get_by_id(self.model, entity_id, includes)
            return self._single(entity, f"{self.entity_name} {entity_id} not found")

        return self._run(lambda: None, action, "Error retrieving entity of type %s with ID %s", entity_id)

    def get_all(self, includes: Sequence[str] | None = None) -> ServiceResult:
        return self._run(
            list,
            lambda: self._many(self.repository.get_all(self.model, includes)),
            "Error retrieving all entities of type %s",
        )

    def get_paginated(self, page_number: int, page_size: int, includes: Sequence[str] | None = None) -> ServiceResult:
        return self._run(
            _empty_page,
            lambda: self._page(self.repository.get_paginated(self.model, page_number, page_size, includes)),
            "Error paginating entities of type %s, page number %s, page size %s",
            page_number,
            page_size,
        )

    def find_by_filters(self, filters: Sequence[PropertyFilter], includes: Sequence[str] | None = None) -> ServiceResult:
        def action():
            entity = self.repository.find_by_filters(self.model, filters, includes)
            return self._single(entity, f"No {self.entity_name} matches the filters")

        return self._run(lambda: None, action, "Error finding entity of type %s with filters %s", filters)

    def filter_by_filters(
        self,
        filters: Sequence[PropertyFilter],
        order: int = SortOrder.ASC,
        includes: Sequence[str] | None = None,
    ) -> ServiceResult:
        return self._run(
            list,
            lambda: self._many(self.repository.filter_by_filters(self.model, filters, order, includes)),
            "Error filtering entities of type %s with filters %s",
            filters,
        )

    def filter_paginated(
        self,
        filters: Sequence[PropertyFilter],
        page_number: int,
        page_size: int,
        order: int = SortOrder.ASC,
        includes: Sequence[str] | None = None,
    ) -> ServiceResult:
        return self._run(
            _empty_page,
            lambda: self._page(
                self.repository.filter_paginated(self.model, filters, page_number, page_size, order, includes)
            ),
            "Error filtering and paginating entities of type %s with filters %s, page number %s, page size %s, order %s",
            filters,
            page_number,
            page_size,
            order,
        )

    def query(self, filter_query: FilterQuery) -> ServiceResult:
        return self.filter_paginated(
            filter_query.filters,
            filter_query.page_number,
            filter_query.page_size,
            filter_query.order,
            filter_query.includes,
        )

    def _write(self, entity, write: Callable[[Any], Any], success: ResponseStatusCode, map_result: bool) -> ServiceResult:
        if entity is None:
            return ServiceResult(None, ResponseStatusCode.BAD_REQUEST, ValidationError("Entity cannot be None"))

        def action():
            result = write(entity)
            if not result:
                return ServiceResult(None, ResponseStatusCode.INTERNAL_SERVER_ERROR, result.error)
            if not map_result:
                return ServiceResult(None, success)
            mapped = self._map(result.entity)
            if mapped is None:
                return ServiceResult(None, ResponseStatusCode.BAD_REQUEST, MappingError(f"Could not map {self.entity_name}"))
            return ServiceResult(mapped, success)

        return self._run(lambda: None, action, "Error writing entity of type %s")

    def create(self, entity) -> ServiceResult:
        return self._write(entity, self.repository.add, ResponseStatusCode.CREATED, map_result=True)

    def update(self, entity) -> ServiceResult:
        return self._write(entity, self.repository.update, ResponseStatusCode.OK, map_result=True)

    def delete(self, entity) -> ServiceResult:
        return self._write(entity, self.repository.delete, ResponseStatusCode.OK, map_result=False)
