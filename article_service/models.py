"""
Database models for articles and their paragraphs.
An article owns an ordered list of paragraphs; order is the paragraph id.
"""
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from article_service.database import Base


class ParagraphType(str, enum.Enum):
    """Closed set of paragraph kinds."""
    PRIMARY_HEADER = "PRIMARY_HEADER"
    SECONDARY_HEADER = "SECONDARY_HEADER"
    TEXT = "TEXT"
    CODE = "CODE"


class Article(Base):
    """
    Model to store articles.

    Attributes:
        id: Primary key, assigned on insert
        created_at: Timestamp of the first insert, never refreshed
        name: Natural key used for create-or-update lookups
        content: Paragraphs in insertion order
    """
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    name = Column(String(255), nullable=False, unique=True)

    content = relationship(
        "Paragraph",
        back_populates="article",
        cascade="all, delete-orphan",
        order_by="Paragraph.id",
    )


class Paragraph(Base):
    """
    Model to store a single typed paragraph of an article.

    The metadata column is mapped as `meta` because `metadata` is reserved
    on declarative classes.
    """
    __tablename__ = "paragraphs"

    id = Column(Integer, primary_key=True, index=True)
    article_id = Column(
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(Enum(ParagraphType, name="paragraph_type"), nullable=False)
    content = Column(Text, nullable=False, default="")
    meta = Column("metadata", Text, nullable=False, default="")

    article = relationship("Article", back_populates="content")
