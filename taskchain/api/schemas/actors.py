from __future__ import annotations

from pydantic import BaseModel, Field


class ActorItem(BaseModel):
    id: str
    display_name: str
    role_level: int
    role_title: str


class ActorRegisterRequest(BaseModel):
    id: str = Field(..., min_length=1, max_length=64, description="Identity provider subject")
    display_name: str = Field(..., min_length=1, max_length=128)
    role_level: int = Field(..., ge=1, description="Staff level; higher is more junior")


class ActorUpdateRequest(BaseModel):
    display_name: str | None = Field(None, min_length=1, max_length=128)
    role_level: int | None = Field(None, ge=1, description="New staff level")
