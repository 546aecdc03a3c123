"""Pydantic request models for API endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SkillUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field("", alias="userId")


class SkillSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new: bool = False
    session_id: str = Field("", alias="sessionId")
    user: SkillUser = Field(default_factory=SkillUser)
    attributes: dict[str, Any] | None = None


class SkillIntent(BaseModel):
    name: str


class SkillRequestBody(BaseModel):
    type: str
    intent: SkillIntent | None = None


class SkillRequest(BaseModel):
    """Voice-assistant skill request (the subset the adventure needs)."""

    version: str = "1.0"
    session: SkillSession = Field(default_factory=SkillSession)
    request: SkillRequestBody


class UpdateSettings(BaseModel):
    adventure_file: str | None = None
    sound_files_url: str | None = None
    finished_webhook_url: str | None = None
    finished_webhook_api_key: str | None = None
