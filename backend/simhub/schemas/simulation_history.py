"""
SimHub Backend — Simulation History Schemas
===========================================

What:  Pydantic models for every simulation-history use case boundary.
Why:   Input models are what validate_input() checks raw bodies, query strings
       and path params against; output models are what validate_response()
       checks entities against before they leave a use case.
How:   camelCase on the wire (CamelModel), snake_case attributes in Python.
       Output models read domain dataclasses directly (from_attributes).

Design Decision:
    Query-string filters treat an empty value ("?status=") the same as an
    absent one, so a client can clear a filter by sending it blank.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field, ValidationInfo, field_validator

from simhub.config import settings
from simhub.domain.simulation_history import SimulationStatus
from simhub.schemas.common import CamelModel, PaginationMetaOutput
from simhub.search import PaginationParams, SimulationHistoryFilters


# ══════════════════════════════════════════════════════════════════════════
# Input Models
# ══════════════════════════════════════════════════════════════════════════


class CreateSimulationHistoryInput(CamelModel):
    """Body of POST /api/simulations."""
    project_path: str = Field(min_length=1, max_length=1024)
    project_name: str = Field(min_length=1, max_length=255)
    ttk_version: str = Field(min_length=1, max_length=50)
    config_json: str = Field(description="Simulation configuration, stored as given")
    status: Optional[SimulationStatus] = Field(default=None, description="Defaults to PENDING")
    summary_json: Optional[str] = None
    has_report: bool = False
    # validate_default: the has_report rule must also run when the path is omitted
    report_file_path: Optional[str] = Field(default=None, validate_default=True)
    duration_ms: Optional[int] = Field(default=None, ge=0)
    battle_count: Optional[int] = Field(default=None, ge=0)
    trecho_count: Optional[int] = Field(default=None, ge=0)
    timestamp: Optional[datetime] = None

    @field_validator("report_file_path")
    @classmethod
    def report_path_matches_flag(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        # hasReport itself failed validation; that error already covers the pair
        if "has_report" not in info.data:
            return v
        has_report = info.data["has_report"]
        if has_report and not (v and v.strip()):
            raise ValueError("reportFilePath is required when hasReport is true")
        if not has_report and v is not None:
            raise ValueError("reportFilePath must be omitted when hasReport is false")
        return v


class ListSimulationHistoryQuery(CamelModel):
    """
    Query string of GET /api/simulations.

    Example:
        ?projectPath=rpg&status=COMPLETED&dateFrom=2024-01-01T00:00:00Z&page=2&perPage=10
    """
    project_path: Optional[str] = None
    status: Optional[SimulationStatus] = None
    ttk_version: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    page: int = Field(default=1, ge=1)
    per_page: int = Field(
        default=settings.default_page_size, ge=1, le=settings.max_page_size
    )

    @field_validator("project_path", "status", "ttk_version", "date_from", "date_to", mode="before")
    @classmethod
    def blank_means_absent(cls, v):
        if isinstance(v, str) and v == "":
            return None
        return v

    def to_filters(self) -> SimulationHistoryFilters:
        return SimulationHistoryFilters(
            project_path=self.project_path,
            status=self.status.value if self.status else None,
            ttk_version=self.ttk_version,
            date_from=self.date_from,
            date_to=self.date_to,
        )

    def to_pagination(self) -> PaginationParams:
        return PaginationParams(page=self.page, per_page=self.per_page)


class EntryIdParams(CamelModel):
    """Path params shared by the /api/simulations/{id} routes."""
    id: str = Field(min_length=1)


class UpdateSimulationStatusInput(CamelModel):
    """
    Body of PATCH /api/simulations/{id}/status.

    PENDING is not accepted: an entry can only move forward.
    summaryJson is stored on COMPLETED (default "{}") and, when given, on FAILED.
    """
    status: Literal["RUNNING", "COMPLETED", "FAILED"]
    summary_json: Optional[str] = None


class AttachReportInput(CamelModel):
    """Body of PUT /api/simulations/{id}/report."""
    report_file_path: str = Field(min_length=1, max_length=1024)

    @field_validator("report_file_path")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("reportFilePath cannot be blank")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Output Models
# ══════════════════════════════════════════════════════════════════════════


class SimulationHistoryEntryOutput(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_path: str
    project_name: str
    status: SimulationStatus
    ttk_version: str
    config_json: str
    summary_json: str
    has_report: bool
    report_file_path: Optional[str] = None
    duration_ms: Optional[int] = Field(default=None, ge=0)
    battle_count: Optional[int] = Field(default=None, ge=0)
    trecho_count: Optional[int] = Field(default=None, ge=0)
    timestamp: datetime
    created_at: datetime
    updated_at: datetime


class SimulationHistoryFiltersOutput(CamelModel):
    """Echo of the filters that produced a search page."""
    model_config = ConfigDict(from_attributes=True)

    project_path: Optional[str] = None
    status: Optional[str] = None
    ttk_version: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class SimulationHistorySearchOutput(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    items: List[SimulationHistoryEntryOutput]
    filters: SimulationHistoryFiltersOutput
    pagination: PaginationMetaOutput
