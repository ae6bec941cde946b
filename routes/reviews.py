"""
Book Review API Module

This module lets a logged-in user add, update or delete their own review of a
book. Every route sits under ``/customer/auth`` and is guarded by the session
token gate.

Dependencies:
- FastAPI for API routing
- Pydantic for request validation
- Logging for auditing review changes
- Security utilities for the session/token gate
"""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from app.database import CatalogStore, get_catalog
from app.errors import BookNotFoundError, ValidationError
from app.security import get_current_username, require_session_claims
from schemas.schemas import (
    ErrorResponse, ReviewDeleteData, ReviewDeleteResponse, ReviewUpsert,
    ReviewWriteData, ReviewWriteResponse
)

logger = logging.getLogger(__name__)

MAX_REVIEW_LENGTH = 1000

router = APIRouter(
    prefix = "/customer/auth/review",
    tags = ["Reviews"],
    dependencies = [Depends(require_session_claims)]
)

AUTH_RESPONSES = {
    401: {"model": ErrorResponse, "description": "No active session."},
    403: {"model": ErrorResponse, "description": "Session token expired or invalid."}
}


@router.put(
    "/{isbn}",
    response_model = ReviewWriteResponse,
    summary = "Add or update your review of a book",
    description = """Stores the review under the logged-in user's name. A user has at most one
    review per book, so writing again replaces the previous text.

    **Authentication Required**
      - An active session holding a valid token (see `/customer/login`).""",
    responses = {
        **AUTH_RESPONSES,
        400: {"model": ErrorResponse, "description": "Review is empty or longer than 1000 characters"},
        404: {"model": ErrorResponse, "description": "No book with this ISBN"}
    })
async def upsert_review(
    isbn: str,
    review_data: ReviewUpsert,
    username: str = Depends(get_current_username),
    catalog: CatalogStore = Depends(get_catalog)):

    review = (review_data.review or "").strip()
    if not review:
        raise ValidationError("Review content is required and cannot be empty", error = "REVIEW_CONTENT_REQUIRED")

    if len(review_data.review) > MAX_REVIEW_LENGTH:
        raise ValidationError(f"Review must be less than {MAX_REVIEW_LENGTH} characters", error = "REVIEW_TOO_LONG")

    try:
        _, previous = await catalog.upsert_review(isbn, username, review)
    except BookNotFoundError as exc:
        raise BookNotFoundError(isbn, requested_isbn = isbn) from exc

    action = "added" if previous is None else "updated"
    logger.info("Review %s by %s for ISBN %s", action, username, isbn)

    return ReviewWriteResponse(
        message = f"Review {action} successfully",
        data = ReviewWriteData(
            isbn = isbn,
            username = username,
            review = review,
            timestamp = datetime.now(timezone.utc),
            action = action
        )
    )

@router.delete(
    "/{isbn}",
    response_model = ReviewDeleteResponse,
    summary = "Delete your review of a book",
    description = """**Authentication Required**
      - An active session holding a valid token.
    **Raises**
      - 404 NOT FOUND: If the book does not exist.
      - 404 NOT FOUND: If the user has no review for this book.""",
    responses = {
        **AUTH_RESPONSES,
        404: {"model": ErrorResponse, "description": "Book or review not found"}
    })
async def delete_review(
    isbn: str,
    username: str = Depends(get_current_username),
    catalog: CatalogStore = Depends(get_catalog)):

    await catalog.delete_review(isbn, username)
    logger.info("Review deleted by %s for ISBN %s", username, isbn)

    return ReviewDeleteResponse(
        message = "Review deleted successfully",
        data = ReviewDeleteData(isbn = isbn, username = username, deleted_at = datetime.now(timezone.utc))
    )
