from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from webapp.core.messages import ResponseStatusCode

T = TypeVar("T")


class PaginatedResult(BaseModel, Generic[T]):
    model_config = ConfigDict(populate_by_name=True)

    items: List[T] = []
    total_count: int = Field(default=0, ge=0, alias="totalCount")

    @model_validator(mode="after")
    def _items_within_total(self):
        if len(self.items) > self.total_count:
            raise ValueError("items cannot outnumber total_count")
        return self


class ApiResponse(BaseModel, Generic[T]):
    """Body whose numeric `message` is expanded by the response envelope middleware."""

    message: ResponseStatusCode
    data: T | None = None


class Envelope(BaseModel, Generic[T]):
    status: int
    success: bool
    message: str
    data: T | None = None
