"""
SimHub Backend — Schema Validator Tests
=======================================

What we test:
    ✅ Valid input comes back typed
    ✅ Every violation is itemized in one pass with dot-joined paths and source
    ✅ Any Pydantic-validatable schema works (models, TypedDict, list types)
    ✅ Response failures are generic to the caller and logged at ERROR
    ✅ Input failures are never logged as faults
"""

import logging
from dataclasses import dataclass
from typing import List

from typing_extensions import TypedDict

import pytest
from pydantic import BaseModel, Field

from simhub.exceptions import InputValidationError, ResponseValidationError
from simhub.schemas.simulation_history import ListSimulationHistoryQuery
from simhub.validation import validate_input, validate_response


class Contact(BaseModel):
    kind: str
    value: str = Field(min_length=1)


class User(BaseModel):
    name: str = Field(min_length=2)
    contacts: List[Contact] = []


class Payload(BaseModel):
    user: User


class Point(TypedDict):
    x: int
    y: int


class TestValidateInput:
    def test_valid_input_returns_typed_value(self):
        result = validate_input(Payload, {"user": {"name": "Ana", "contacts": []}}, "body")
        assert isinstance(result, Payload)
        assert result.user.name == "Ana"

    def test_nested_errors_are_itemized_with_paths(self):
        raw = {"user": {"contacts": [{"kind": "email", "value": ""}, {"value": "x"}]}}

        with pytest.raises(InputValidationError) as exc_info:
            validate_input(Payload, raw, "body")

        errors = exc_info.value.errors
        assert [e.field for e in errors] == [
            "user.name",
            "user.contacts.0.value",
            "user.contacts.1.kind",
        ]
        assert all(e.source == "body" for e in errors)
        assert all(e.message for e in errors)

    def test_source_tag_is_copied_onto_every_error(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_input(Point, {"x": "not-a-number"}, "params")

        assert {e.source for e in exc_info.value.errors} == {"params"}
        assert {e.field for e in exc_info.value.errors} == {"x", "y"}

    def test_typed_dict_schema(self):
        assert validate_input(Point, {"x": "1", "y": 2}, "query") == {"x": 1, "y": 2}

    def test_list_schema_reports_indices(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_input(List[int], [1, "two", 3], "body")
        assert exc_info.value.errors[0].field == "1"

    def test_camel_case_aliases_appear_in_field_paths(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_input(ListSimulationHistoryQuery, {"perPage": "0", "page": "0"}, "query")

        fields = {e.field for e in exc_info.value.errors}
        assert fields == {"page", "perPage"}

    def test_input_failures_are_not_logged_as_faults(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="simhub.validation"):
            with pytest.raises(InputValidationError):
                validate_input(Payload, {}, "body")

        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


@dataclass
class Row:
    user: User


class TestValidateResponse:
    def test_reads_attributes_from_objects(self):
        result = validate_response(Payload, Row(user=User(name="Bea")))
        assert result.user.name == "Bea"

    def test_failure_is_generic_and_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="simhub.validation"):
            with pytest.raises(ResponseValidationError) as exc_info:
                validate_response(Payload, {"user": {"name": ""}})

        exc = exc_info.value
        assert exc.message == "Response validation failed"
        assert not hasattr(exc, "errors")

        records = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(records) == 1
        assert "Payload" in records[0].getMessage()
