"""
Pydantic schemas for request/response validation.
"""
from datetime import datetime
from typing import List

from pydantic import AliasChoices, BaseModel, Field

from article_service.models import ParagraphType


class ParagraphIn(BaseModel):
    """Request schema for one paragraph of an article."""
    type: ParagraphType
    content: str = ""
    metadata: str = ""


class ArticleIn(BaseModel):
    """
    Request schema for create-or-update.
    Client supplied id/created_at are ignored.
    """
    name: str = Field(..., min_length=1, max_length=255, description="Natural key of the article")
    content: List[ParagraphIn] = Field(default_factory=list, description="Paragraphs in display order")


class ParagraphResponse(BaseModel):
    """Response schema for paragraph data."""
    id: int
    article_id: int
    type: ParagraphType
    content: str
    metadata: str = Field(validation_alias=AliasChoices("meta", "metadata"))

    class Config:
        from_attributes = True


class ArticleResponse(BaseModel):
    """Response schema for an article with its paragraphs."""
    id: int
    created_at: datetime
    name: str
    content: List[ParagraphResponse]

    class Config:
        from_attributes = True


class StatusResponse(BaseModel):
    """Short status tag returned by write endpoints."""
    status: str
