"""
Public Catalog API Module

Read-only operations that need no login: list every book, look one up by ISBN,
search by author or title, and read a book's reviews.

Dependencies:
- FastAPI for API routing
- Pydantic for response shaping
- The in-memory catalog store, injected per request
"""
from datetime import datetime, timezone
from typing import Dict
from fastapi import APIRouter, Depends, status
from app.database import CatalogStore, get_catalog
from app.errors import BookNotFoundError, NotFoundError, ValidationError
from models.models import Book
from schemas.schemas import BookCollectionResponse, BookDetailResponse, BookResponse, ErrorResponse, ReviewListResponse

router = APIRouter(
    tags = ["Books"]
)


def _require_param(value: str, label: str) -> str:
    """Reject a blank path parameter and return it stripped. ISBNs are looked up as given."""
    value = value.strip()
    if not value:
        raise ValidationError(f"{label} parameter is required", error = f"MISSING_{label.upper()}")
    return value

def _serialize(books: Dict[str, Book]) -> Dict[str, BookResponse]:
    return {isbn: BookResponse.model_validate(book) for isbn, book in books.items()}


@router.get(
    "/",
    response_model = BookCollectionResponse,
    response_model_exclude_none = True,
    summary = "Retrieve every book in the catalog",
    responses = {500: {"model": ErrorResponse}})
async def list_books(catalog: CatalogStore = Depends(get_catalog)):
    books = await catalog.list_all()
    return BookCollectionResponse(
        message = "Books retrieved successfully",
        data = _serialize(books),
        count = len(books),
        timestamp = datetime.now(timezone.utc)
    )

@router.get(
    "/isbn/{isbn}",
    response_model = BookDetailResponse,
    summary = "Retrieve one book by ISBN",
    responses = {
        400: {"model": ErrorResponse, "description": "ISBN parameter is blank"},
        404: {"model": ErrorResponse, "description": "No book with this ISBN"}
    })
async def get_book(isbn: str, catalog: CatalogStore = Depends(get_catalog)):
    _require_param(isbn, "ISBN")
    try:
        book = await catalog.get_by_isbn(isbn)
    except BookNotFoundError as exc:
        raise BookNotFoundError(isbn, requested_isbn = isbn) from exc
    return BookDetailResponse(message = "Book retrieved successfully", data = BookResponse.model_validate(book), isbn = isbn)

async def _search(term: str, name: str, search) -> BookCollectionResponse:
    term = _require_param(term, name.capitalize())
    books = await search(term)

    # an empty search result is a 404 at the HTTP boundary only
    if not books:
        preposition = "by" if name == "author" else "with"
        raise NotFoundError(
            f'No books found {preposition} {name} containing "{term}"',
            error = "NO_BOOKS_FOUND",
            search_term = term
        )

    return BookCollectionResponse(
        message = "Books retrieved successfully",
        data = _serialize(books),
        count = len(books),
        timestamp = datetime.now(timezone.utc),
        search_term = term
    )

@router.get(
    "/author/{author}",
    response_model = BookCollectionResponse,
    summary = "Search books by author",
    description = "Case-insensitive partial match on the author's name.",
    responses = {
        400: {"model": ErrorResponse, "description": "Author parameter is blank"},
        404: {"model": ErrorResponse, "description": "No author matched"}
    })
async def search_by_author(author: str, catalog: CatalogStore = Depends(get_catalog)):
    return await _search(author, "author", catalog.search_by_author)

@router.get(
    "/title/{title}",
    response_model = BookCollectionResponse,
    summary = "Search books by title",
    description = "Case-insensitive partial match on the title.",
    responses = {
        400: {"model": ErrorResponse, "description": "Title parameter is blank"},
        404: {"model": ErrorResponse, "description": "No title matched"}
    })
async def search_by_title(title: str, catalog: CatalogStore = Depends(get_catalog)):
    return await _search(title, "title", catalog.search_by_title)

@router.get(
    "/review/{isbn}",
    response_model = ReviewListResponse,
    status_code = status.HTTP_200_OK,
    summary = "Retrieve the reviews of one book",
    description = "Reviews are keyed by the username that wrote them. A book without reviews is not an error.",
    responses = {
        400: {"model": ErrorResponse, "description": "ISBN parameter is blank"},
        404: {"model": ErrorResponse, "description": "No book with this ISBN"}
    })
async def get_reviews(isbn: str, catalog: CatalogStore = Depends(get_catalog)):
    _require_param(isbn, "ISBN")
    try:
        reviews = await catalog.list_reviews(isbn)
    except BookNotFoundError as exc:
        raise BookNotFoundError(isbn, requested_isbn = isbn) from exc

    return ReviewListResponse(
        message = "Reviews retrieved successfully" if reviews else "No reviews found for this book",
        data = reviews,
        isbn = isbn,
        count = len(reviews),
        has_reviews = bool(reviews)
    )
