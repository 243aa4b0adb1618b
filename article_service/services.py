"""
Article persistence logic.
ArticleStore wraps one database session and implements create-or-update by
name, the ordered listing, and idempotent delete by id.
"""
import enum
import logging
import re
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from article_service.models import Article, Paragraph
from article_service.schemas import ArticleIn

logger = logging.getLogger(__name__)

MAX_ARTICLE_ID = 2 ** 32 - 1

_UNSIGNED_RE = re.compile(r"[0-9]+")


class UpsertStatus(str, enum.Enum):
    """Outcome of ArticleStore.create_or_update."""
    CREATED = "created"
    UPDATED = "updated"


class InvalidArticleId(ValueError):
    """Raised when a path id is not an unsigned integer."""


def parse_article_id(raw: str) -> int:
    """
    Parse a textual article id.

    Args:
        raw: Path segment as received

    Returns:
        int: The id, between 0 and 2**32 - 1

    Raises:
        InvalidArticleId: If raw is not a base-10 unsigned integer in range
    """
    # bounded length keeps int() within its digit limit
    if not _UNSIGNED_RE.fullmatch(raw) or len(raw.lstrip("0")) > 10:
        raise InvalidArticleId("invalid article ID")
    article_id = int(raw)
    if article_id > MAX_ARTICLE_ID:
        raise InvalidArticleId("invalid article ID")
    return article_id


class ArticleStore:
    """Create, list and delete articles through a single session."""

    def __init__(self, db: Session):
        self.db = db

    def create_or_update(self, article_in: ArticleIn) -> UpsertStatus:
        """
        Store an article by name.

        If an article with the same name exists its paragraphs are replaced
        wholesale and the article row is otherwise left alone. Otherwise a
        new article is inserted with its paragraphs.

        A concurrent insert of the same name loses on the unique constraint;
        the lookup is then retried once and takes the update path.

        Args:
            article_in: Validated article payload

        Returns:
            UpsertStatus: CREATED or UPDATED

        Raises:
            SQLAlchemyError: If the backend fails; the session is rolled back
        """
        try:
            return self._create_or_update(article_in)
        except IntegrityError:
            logger.warning("Concurrent create for article %r, retrying as update", article_in.name)
            return self._create_or_update(article_in)

    def _create_or_update(self, article_in: ArticleIn) -> UpsertStatus:
        paragraphs = [
            Paragraph(type=p.type, content=p.content, meta=p.metadata)
            for p in article_in.content
        ]

        try:
            article = self.find_by_name(article_in.name)

            if article is not None:
                # delete-orphan cascade drops the previous paragraphs in the same flush
                article.content = paragraphs
                status = UpsertStatus.UPDATED
            else:
                article = Article(name=article_in.name, content=paragraphs)
                self.db.add(article)
                status = UpsertStatus.CREATED

            self.db.flush()
            article_id = article.id
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info("Article %r %s (id=%s, %d paragraphs)",
                    article_in.name, status.value, article_id, len(paragraphs))
        return status

    def find_by_name(self, name: str) -> Optional[Article]:
        """Get the first article with the given name, or None."""
        return (
            self.db.query(Article)
            .filter(Article.name == name)
            .order_by(Article.id)
            .first()
        )

    def list_articles(self) -> List[Article]:
        """
        Get all articles, newest id first, with paragraphs loaded.

        Returns:
            List[Article]: Articles ordered by id descending
        """
        return (
            self.db.query(Article)
            .options(selectinload(Article.content))
            .order_by(Article.id.desc())
            .all()
        )

    def delete_article(self, article_id: int) -> None:
        """
        Delete an article and its paragraphs.
        Deleting an id that does not exist is not an error.

        Args:
            article_id: Id of the article to delete

        Raises:
            SQLAlchemyError: If the backend fails; the session is rolled back
        """
        try:
            article = self.db.get(Article, article_id)
            if article is None:
                logger.info("Article %s not found, nothing to delete", article_id)
                return
            self.db.delete(article)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info("Article %s deleted", article_id)
