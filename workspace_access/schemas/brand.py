"""
Brand schemas.
"""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict


class BrandCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class BrandResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    name: str
    is_active: bool
    created_at: datetime


class SocialAccountCreate(BaseModel):
    platform: str = Field(min_length=1, max_length=50)
    handle: str = Field(min_length=1, max_length=255)


class SocialAccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    brand_id: UUID
    platform: str
    handle: str
    created_at: datetime


class BrandContentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)


class BrandContentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    brand_id: UUID
    title: str
    created_at: datetime
