"""
API endpoint definitions for articles.
Handlers translate store outcomes and failures into HTTP responses.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from article_service.database import get_db
from article_service.schemas import ArticleIn, ArticleResponse, StatusResponse
from article_service.services import ArticleStore, InvalidArticleId, parse_article_id

logger = logging.getLogger(__name__)

router = APIRouter()


def get_article_store(db: Session = Depends(get_db)) -> ArticleStore:
    """Dependency building a store around the request's session."""
    return ArticleStore(db)


@router.post("/articles", response_model=StatusResponse)
def create_or_update_endpoint(
    article: ArticleIn,
    store: ArticleStore = Depends(get_article_store)
):
    """
    Create an article, or replace the paragraphs of the article with the same name.

    Returns:
        StatusResponse: {"status": "created"} or {"status": "updated"}

    Raises:
        HTTPException: 500 if the database write fails
    """
    try:
        status = store.create_or_update(article)
    except Exception as e:
        logger.exception("Failed to store article %r", article.name)
        raise HTTPException(status_code=500, detail=str(e))

    return StatusResponse(status=status.value)


@router.get("/articles", response_model=List[ArticleResponse])
def list_endpoint(store: ArticleStore = Depends(get_article_store)):
    """
    List every article with its paragraphs, most recently created first.
    """
    try:
        return store.list_articles()
    except Exception as e:
        logger.exception("Failed to list articles")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/articles/{article_id}", response_model=StatusResponse)
def delete_endpoint(article_id: str, store: ArticleStore = Depends(get_article_store)):
    """
    Delete an article and its paragraphs.

    Deleting an id that does not exist still answers {"status": "deleted"}.

    Raises:
        HTTPException: 400 if the id is not an unsigned integer,
            500 if the database delete fails
    """
    try:
        parsed_id = parse_article_id(article_id)
    except InvalidArticleId as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        store.delete_article(parsed_id)
    except Exception as e:
        logger.exception("Failed to delete article %s", parsed_id)
        raise HTTPException(status_code=500, detail=str(e))

    return StatusResponse(status="deleted")
