"""
SimHub Backend — Schema Validation Boundary
===========================================

What:  The only sanctioned crossing between untyped data and typed data.
Why:   Every use case validates what comes in and what goes out against a
       declarative Pydantic schema, so no raw dict reaches the domain and no
       malformed entity reaches a client.
How:   pydantic.TypeAdapter accepts any schema Pydantic understands (BaseModel
       subclasses, TypedDicts, Annotated types, lists of models...).

Asymmetry (deliberate):
    validate_input()    → InputValidationError with one FieldError per
                          violation. Client-actionable, itemized, not logged
                          as a fault.
    validate_response() → ResponseValidationError with a generic message.
                          A programming defect: the data and cause are logged
                          at ERROR here and never itemized to the caller.
"""

import logging
from typing import Any, Iterable, List, Sequence, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from simhub.exceptions import InputValidationError, ResponseValidationError
from simhub.schemas.common import FieldError, InputSource

logger = logging.getLogger(__name__)


def _field_path(loc: Sequence[Union[str, int]]) -> str:
    """('user', 'contacts', 0, 'value') → 'user.contacts.0.value'"""
    return ".".join(str(part) for part in loc)


def _schema_name(schema: Any) -> str:
    return getattr(schema, "__name__", repr(schema))


def to_field_errors(
    issues: Iterable[dict], source: InputSource
) -> List[FieldError]:
    """Convert Pydantic error dicts into FieldError records, preserving order."""
    return [
        FieldError(field=_field_path(issue["loc"]), message=issue["msg"], source=source)
        for issue in issues
    ]


def validate_input(schema: Any, raw_data: Any, source: InputSource) -> Any:
    """
    Validate untrusted input and return the typed value.

    Args:
        schema:   Any Pydantic-validatable type.
        raw_data: Untyped data (parsed JSON body, query mapping, path params).
        source:   Origin tag copied onto every FieldError: body, query or params.

    Returns:
        The validated, typed value (a model instance for BaseModel schemas).

    Raises:
        InputValidationError: with ALL violations found in one pass, each
            carrying the dot-joined field path and the source tag.
    """
    try:
        return TypeAdapter(schema).validate_python(raw_data)
    except PydanticValidationError as exc:
        errors = to_field_errors(exc.errors(), source)
        logger.debug(
            "Input validation failed for %s (%s): %d error(s)",
            _schema_name(schema), source, len(errors),
        )
        raise InputValidationError(
            errors, context={"schema": _schema_name(schema), "source": source}
        ) from None


def validate_response(schema: Any, data: Any) -> Any:
    """
    Validate outbound data and return the typed value.

    Objects are read attribute-by-attribute (from_attributes), so domain
    entities can be passed directly.

    Raises:
        ResponseValidationError: generic fault; never returns partial data.
    """
    try:
        return TypeAdapter(schema).validate_python(data, from_attributes=True)
    except PydanticValidationError as exc:
        logger.error(
            "Response validation failed for %s: %s | data=%r",
            _schema_name(schema), exc, data,
        )
        raise ResponseValidationError(context={"schema": _schema_name(schema)}) from exc
