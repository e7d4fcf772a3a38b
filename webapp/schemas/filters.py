from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from webapp.core.config import settings


class FilterOperator(str, Enum):
    EQ = "=="
    NEQ = "!="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="

    @classmethod
    def parse(cls, raw: Any) -> "FilterOperator | None":
        if isinstance(raw, cls):
            return raw
        text = str(raw or "").strip()
        if text == "=":
            return cls.EQ
        for item in cls:
            if text == item.value or text.upper() == item.name:
                return item
        return None


class SortOrder(IntEnum):
    ASC = 1
    DESC = 2


class PropertyFilter(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    property_name: str = Field(default="", alias="propertyName")
    operator: str = FilterOperator.EQ.value
    value: Any = None

    @field_validator("property_name", mode="before")
    @classmethod
    def _null_name_is_blank(cls, raw: Any) -> Any:
        return "" if raw is None else raw

    @field_validator("operator", mode="before")
    @classmethod
    def _normalize_operator(cls, raw: Any) -> str:
        if raw is None:
            return FilterOperator.EQ.value
        parsed = FilterOperator.parse(raw)
        # Unknown spellings are kept so compilation can report them.
        return parsed.value if parsed is not None else str(raw)

    @property
    def is_blank(self) -> bool:
        return not self.property_name.strip() or self.value is None


class FilterQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filters: List[PropertyFilter] = []
    page_number: int = Field(default=1, ge=1, alias="pageNumber")
    page_size: int = Field(
        default_factory=lambda: settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        alias="pageSize",
    )
    order: int = 1
    includes: List[str] = []
