from __future__ import annotations


class DataAccessError(Exception):
    pass


class ValidationError(DataAccessError):
    """Caller supplied arguments the data layer cannot act on."""


class InvalidIdentifierError(ValidationError):
    def __init__(self, entity_id):
        super().__init__(f"Identifier must be a positive integer, got {entity_id!r}")
        self.entity_id = entity_id


class InvalidPaginationError(ValidationError):
    def __init__(self, page_number, page_size):
        super().__init__(f"Invalid page window: page_number={page_number!r}, page_size={page_size!r}")
        self.page_number = page_number
        self.page_size = page_size


class UnknownPropertyError(ValidationError):
    def __init__(self, entity_name: str, property_name: str):
        super().__init__(f'Property "{property_name}" does not exist on entity "{entity_name}"')
        self.entity_name = entity_name
        self.property_name = property_name


class FilterValueError(ValidationError):
    def __init__(self, property_name: str, kind: str):
        super().__init__(f'Invalid filter value for property "{property_name}" ({kind})')
        self.property_name = property_name
        self.kind = kind


class EmptyFilterError(ValidationError):
    def __init__(self):
        super().__init__("At least one non-empty filter is required")


class NotFoundError(DataAccessError):
    pass


class MappingError(DataAccessError):
    pass


class UnsupportedOperatorError(DataAccessError):
    # Programming error in the caller, never converted into a status.
    def __init__(self, operator):
        super().__init__(f"Unsupported operator '{operator}'")
        self.operator = operator
