"""
SimHub Backend — Custom Exception Hierarchy
===========================================

What:  Defines application-specific exceptions for the error taxonomy.
Why:   Custom exceptions let the global handlers in main.py map each failure
       class to the right HTTP status and response shape.
How:   Each exception carries a message and optional context dict.
Who:   Raised by the validator, services and repository adapters.

Exception Hierarchy:
    SimHubError (base)
    ├── InputValidationError     → 400 Bad Request (itemized, client can fix)
    ├── ResponseValidationError  → 500 Internal Server Error (generic)
    ├── NotFoundError            → 404 Not Found (use-case lookup failed)
    ├── RecordNotFoundError      → 404 Not Found (update of an unknown id)
    └── DomainError              → 422 Unprocessable Entity (business rule)

What is NOT here:
    Storage-backend faults (sqlalchemy.exc.SQLAlchemyError) are never wrapped.
    They travel through adapters and services unchanged and are collapsed to a
    generic 500 only by the catch-all handler.
    Repository lookups never raise for absence; they return None.
"""

from typing import Any, Dict, List, Optional


class SimHubError(Exception):
    """
    Base exception for all SimHub application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InputValidationError(SimHubError):
    """
    Raised when untyped input fails its schema.

    What:    Client-caused; one FieldError per violated constraint.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Input validation failed",
            "details": [
                {"field": "projectPath", "message": "Field required", "source": "body"}
            ]
        }
    """

    def __init__(
        self,
        errors: List[Any],
        message: str = "Input validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = list(errors)


class ResponseValidationError(SimHubError):
    """
    Raised when data leaving a use case does not match its output schema.

    Why generic: The caller did nothing wrong; this is a programming defect.
    The offending data and cause are logged by validate_response() and never
    itemized back to the client.
    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Response validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SimHubError):
    """
    Raised by a use case when the entity it needs does not exist.

    Repositories return None for absence; services translate None into this
    exception so routes can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RecordNotFoundError(SimHubError):
    """
    Raised by a repository adapter when update() targets an id it does not hold.

    Both adapters raise this same type so their observable behavior matches.
    """

    def __init__(
        self,
        record: str,
        record_id: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update({"record": record, "record_id": record_id})
        super().__init__(message=f"Cannot update {record} '{record_id}': no such record", context=ctx)
        self.record = record
        self.record_id = record_id


class DomainError(SimHubError):
    """
    Raised when a business rule is violated.

    When: Illegal status transition, duplicate project path, entity invariant
          broken (e.g. report path without a report).
    HTTP: 422 Unprocessable Entity
    """

    def __init__(
        self,
        message: str = "Business rule violated",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
