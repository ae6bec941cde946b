import copy
from typing import Dict
from models.models import Book

# Sample books, keyed by ISBN
books = {
    "1": {"author": "Chinua Achebe", "title": "Things Fall Apart", "genre": ["Fiction", "Historical"], "year": 1958, "rating": 4.5},
    "2": {"author": "Hans Christian Andersen", "title": "Fairy tales", "genre": ["Fantasy", "Children"], "year": 1837, "rating": 4.3},
    "3": {"author": "Dante Alighieri", "title": "The Divine Comedy", "genre": ["Epic Poetry", "Classic"], "year": 1320, "rating": 4.7},
    "4": {"author": "Unknown", "title": "The Epic Of Gilgamesh", "genre": ["Epic Poetry", "Ancient"], "year": -2100, "rating": 4.2},
    "5": {"author": "Unknown", "title": "The Book Of Job", "genre": ["Religious", "Philosophy"], "year": -600, "rating": 4.4},
    "6": {"author": "Unknown", "title": "One Thousand and One Nights", "genre": ["Folklore", "Fantasy"], "year": 800, "rating": 4.6},
    "7": {"author": "Unknown", "title": "Njál's Saga", "genre": ["Saga", "Historical"], "year": 1280, "rating": 4.1},
    "8": {"author": "Jane Austen", "title": "Pride and Prejudice", "genre": ["Romance", "Classic"], "year": 1813, "rating": 4.8},
    "9": {"author": "Honoré de Balzac", "title": "Le Père Goriot", "genre": ["Realism", "Fiction"], "year": 1835, "rating": 4.0},
    "10": {"author": "Samuel Beckett", "title": "Molloy, Malone Dies, The Unnamable, the trilogy", "genre": ["Modernist", "Philosophical"], "year": 1951, "rating": 4.2},
}


def seed_books() -> Dict[str, Book]:
    """Build a fresh catalog from the sample books. Every call returns new objects."""
    return {isbn: Book(**copy.deepcopy(book)) for isbn, book in books.items()}


if __name__ == "__main__":
    for isbn, book in seed_books().items():
        print(f"{isbn:>3}  {book.title} ({book.author}, {book.year})")
    print("✅ Catalog seed is valid!")
