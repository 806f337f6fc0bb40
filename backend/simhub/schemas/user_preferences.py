"""
SimHub Backend — User Preferences Schemas
=========================================

What:  Input and output models for GET/PATCH /api/preferences.
How:   Theme and language go through the same parse functions the aggregate
       uses, so the API accepts exactly what the domain accepts ('dark' is a
       valid theme, 'pt-br' is not a valid language).

Partial updates:
    UpdateUserPreferencesInput distinguishes "omitted" from "sent as null"
    through model_fields_set, e.g. {"windowX": null} clears the position
    while omitting windowX leaves it alone.
"""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from simhub.config import settings
from simhub.domain.common import Invalid
from simhub.domain.user_preferences import (
    MAX_HISTORY_ENTRIES_RANGE,
    MIN_AUTO_SAVE_INTERVAL_MS,
    ThemeMode,
    parse_language_code,
    parse_theme_mode,
)
from simhub.schemas.common import CamelModel


class GetUserPreferencesQuery(CamelModel):
    user_id: str = Field(default=settings.default_user_id, min_length=1)


class UpdateUserPreferencesInput(CamelModel):
    user_id: str = Field(default=settings.default_user_id, min_length=1)
    theme: Optional[ThemeMode] = None
    language: Optional[str] = None
    window_width: Optional[int] = Field(default=None, gt=0)
    window_height: Optional[int] = Field(default=None, gt=0)
    window_x: Optional[int] = None
    window_y: Optional[int] = None
    window_is_maximized: Optional[bool] = None
    auto_save_interval: Optional[int] = Field(default=None, ge=MIN_AUTO_SAVE_INTERVAL_MS)
    max_history_entries: Optional[int] = Field(
        default=None,
        ge=MAX_HISTORY_ENTRIES_RANGE[0],
        le=MAX_HISTORY_ENTRIES_RANGE[1],
    )
    last_project_path: Optional[str] = None

    @field_validator("theme", mode="before")
    @classmethod
    def parse_theme(cls, v):
        if v is None:
            return v
        parsed = parse_theme_mode(v)
        if isinstance(parsed, Invalid):
            raise ValueError(parsed.reason)
        return parsed.value

    @field_validator("language")
    @classmethod
    def parse_language(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        parsed = parse_language_code(v)
        if isinstance(parsed, Invalid):
            raise ValueError(parsed.reason)
        return parsed.value

    def was_sent(self, name: str) -> bool:
        return name in self.model_fields_set


class UserPreferencesOutput(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    theme: ThemeMode
    language: str
    window_width: int = Field(gt=0)
    window_height: int = Field(gt=0)
    window_x: Optional[int] = None
    window_y: Optional[int] = None
    window_is_maximized: bool
    auto_save_interval: int
    max_history_entries: int
    last_project_path: Optional[str] = None
    last_open_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
