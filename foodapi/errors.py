from enum import Enum


class ErrorType(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    REFERENTIAL_INTEGRITY = "referential_integrity"
    SCHEMA = "schema"
    CONFLICT = "conflict"
    INTERNAL_ERROR = "internal_error"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.VALIDATION: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.REFERENTIAL_INTEGRITY: 400,
    ErrorType.SCHEMA: 400,
    ErrorType.CONFLICT: 409,
    ErrorType.INTERNAL_ERROR: 500,
}
