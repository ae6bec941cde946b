"""
In-memory Stores

The catalog and the user registry live in memory for the lifetime of the
process. Each store owns its data; ``main.create_app`` builds one of each and
hangs them on ``app.state``, and handlers receive them through ``get_catalog``
and ``get_credentials``.

Store methods are coroutines so a real datastore can replace them without
touching the handlers. Writes are serialized per store with an asyncio lock.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from fastapi import Request
from app.errors import BookNotFoundError, ConflictError, ReviewNotFoundError
from app.security import get_password_hash, verify_password
from models.models import Book, User
from seed_data import seed_books

logger = logging.getLogger(__name__)


class CatalogStore:
    """Books keyed by ISBN, with each book's reviews keyed by username."""

    def __init__(self, books: Optional[Dict[str, Book]] = None, latency: float = 0.0):
        self._books = seed_books() if books is None else books
        self._latency = latency
        self._write_lock = asyncio.Lock()

    async def _wait(self):
        if self._latency:
            await asyncio.sleep(self._latency)

    def _require(self, isbn: str) -> Book:
        book = self._books.get(isbn)
        if book is None:
            raise BookNotFoundError(isbn)
        return book

    def _search(self, field: str, term: str) -> Dict[str, Book]:
        needle = term.lower()
        return {
            isbn: book for isbn, book in self._books.items()
            if needle in getattr(book, field).lower()
        }

    async def list_all(self) -> Dict[str, Book]:
        await self._wait()
        return dict(self._books)

    async def get_by_isbn(self, isbn: str) -> Book:
        await self._wait()
        return self._require(isbn)

    async def search_by_author(self, author: str) -> Dict[str, Book]:
        """Case-insensitive substring match on author. No match is an empty dict, not an error."""
        await self._wait()
        return self._search("author", author)

    async def search_by_title(self, title: str) -> Dict[str, Book]:
        await self._wait()
        return self._search("title", title)

    async def list_reviews(self, isbn: str) -> Dict[str, str]:
        await self._wait()
        return dict(self._require(isbn).reviews)

    async def upsert_review(self, isbn: str, username: str, text: str) -> Tuple[Book, Optional[str]]:
        """Set ``username``'s review of ``isbn``. Returns the book and the text it replaced, if any."""
        await self._wait()
        async with self._write_lock:
            book = self._require(isbn)
            previous = book.reviews.get(username)
            book.reviews[username] = text
            return book, previous

    async def delete_review(self, isbn: str, username: str) -> Book:
        """
        Remove ``username``'s review of ``isbn``.

        Raises:
            BookNotFoundError: the ISBN is not in the catalog.
            ReviewNotFoundError: the book exists but the user never reviewed it.
        """
        await self._wait()
        async with self._write_lock:
            book = self._require(isbn)
            if username not in book.reviews:
                raise ReviewNotFoundError(isbn, username)
            del book.reviews[username]
            return book


class CredentialStore:
    """Registered users. Passwords are kept only as salted hashes."""

    def __init__(self, users: Optional[List[User]] = None, latency: float = 0.0):
        self._users: Dict[str, User] = {user.username: user for user in users or []}
        self._latency = latency
        self._write_lock = asyncio.Lock()

    async def _wait(self):
        if self._latency:
            await asyncio.sleep(self._latency)

    async def register(self, username: str, password: str) -> User:
        await self._wait()
        password_hash = get_password_hash(password)
        async with self._write_lock:
            if username in self._users:
                raise ConflictError("Username already exists", error = "USERNAME_EXISTS")
            user = User(
                username = username,
                password_hash = password_hash,
                registered_at = datetime.now(timezone.utc)
            )
            self._users[username] = user
        logger.info("Registered user %s", username)
        return user

    async def authenticate(self, username: str, password: str) -> bool:
        await self._wait()
        user = self._users.get(username)
        if user is None:
            return False
        return verify_password(password, user.password_hash)

    async def get(self, username: str) -> Optional[User]:
        await self._wait()
        return self._users.get(username)


# -----------------------------------
# Dependencies
# -----------------------------------
def get_catalog(request: Request) -> CatalogStore:
    return request.app.state.catalog

def get_credentials(request: Request) -> CredentialStore:
    return request.app.state.credentials
