"""
SimHub Backend — Route Helpers
==============================

What:  Reads request bodies as untyped JSON for the services to validate.
Why:   Routes never declare Pydantic body models; validate_input() is the only
       typed boundary, so malformed JSON must surface as the same 400 shape.
"""

import json
from typing import Any

from fastapi import Request

from simhub.exceptions import InputValidationError
from simhub.schemas.common import FieldError


async def read_json_body(request: Request) -> Any:
    """
    Return the parsed JSON body, or {} when the body is empty.

    Raises:
        InputValidationError: the body is not valid JSON.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise InputValidationError(
            [FieldError(field="", message=f"Malformed JSON body: {exc}", source="body")]
        ) from None
