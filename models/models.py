from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List


@dataclass
class Book:
    author: str
    title: str
    genre: List[str] = field(default_factory = list)
    year: int = 0  # negative for BCE
    rating: float = 0.0

    #username -> review text, one review per user
    reviews: Dict[str, str] = field(default_factory = dict)


@dataclass
class User:
    username: str
    password_hash: str
    registered_at: datetime


@dataclass
class SessionEntry:
    """What a successful login binds to the client's session."""
    access_token: str
    username: str
    logged_in_at: str

    @classmethod
    def from_session(cls, data: dict) -> "SessionEntry":
        return cls(
            access_token = data["access_token"],
            username = data["username"],
            logged_in_at = data["logged_in_at"]
        )

    def to_session(self) -> dict:
        return {
            "access_token": self.access_token,
            "username": self.username,
            "logged_in_at": self.logged_in_at
        }
