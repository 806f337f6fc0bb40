"""
SimHub Backend — User Preferences Service
=========================================

What:  Read and partially update a user's preferences.
Why:   Preferences are created lazily: the first read (or update) for a
       user_id persists the defaults, so clients never see a 404 here.
"""

import logging
from typing import Any, Mapping

from simhub.domain.user_preferences import UserPreferences
from simhub.repositories.ports import UserPreferencesRepository
from simhub.schemas.user_preferences import (
    GetUserPreferencesQuery,
    UpdateUserPreferencesInput,
    UserPreferencesOutput,
)
from simhub.validation import validate_input, validate_response

logger = logging.getLogger(__name__)


class UserPreferencesService:
    def __init__(self, repository: UserPreferencesRepository):
        self.repository = repository

    async def _load_or_create(self, user_id: str) -> UserPreferences:
        preferences = await self.repository.find_by_user_id(user_id)
        if preferences is None:
            preferences = UserPreferences.create_defaults(user_id)
            await self.repository.save(preferences)
            logger.info("Default preferences created for user %s", user_id)
        return preferences

    async def get_preferences(self, raw_query: Mapping[str, Any]) -> UserPreferencesOutput:
        query: GetUserPreferencesQuery = validate_input(
            GetUserPreferencesQuery, dict(raw_query), "query"
        )
        preferences = await self._load_or_create(query.user_id)
        return validate_response(UserPreferencesOutput, preferences)

    async def update_preferences(self, raw_body: Any) -> UserPreferencesOutput:
        """
        Apply only the fields present in the body.

        Window size changes only when both windowWidth and windowHeight are
        sent. windowX / windowY may be sent alone; the other keeps its value.
        """
        body: UpdateUserPreferencesInput = validate_input(
            UpdateUserPreferencesInput, raw_body, "body"
        )
        preferences = await self._load_or_create(body.user_id)

        if body.theme is not None:
            preferences.change_theme(body.theme)
        if body.language is not None:
            preferences.change_language(body.language)
        if body.window_width is not None and body.window_height is not None:
            preferences.update_window_dimensions(body.window_width, body.window_height)
        if body.was_sent("window_x") or body.was_sent("window_y"):
            preferences.update_window_position(
                body.window_x if body.was_sent("window_x") else preferences.window_x,
                body.window_y if body.was_sent("window_y") else preferences.window_y,
            )
        if body.window_is_maximized is not None:
            preferences.set_window_maximized(body.window_is_maximized)
        if body.auto_save_interval is not None:
            preferences.change_auto_save_interval(body.auto_save_interval)
        if body.max_history_entries is not None:
            preferences.change_max_history_entries(body.max_history_entries)
        if body.was_sent("last_project_path"):
            preferences.update_last_project_path(body.last_project_path)

        await self.repository.save(preferences)
        return validate_response(UserPreferencesOutput, preferences)
