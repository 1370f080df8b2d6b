"""
Book Repository
===============

sqlite3 storage for ``Book`` records. Every query binds user input as a
parameter; nothing is interpolated into SQL text.
"""

from contextlib import closing
from typing import List, Union
import logging
import os
import sqlite3

from sqli.book import Book

logger = logging.getLogger(__name__)

CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS books (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    author TEXT NOT NULL,
    read INTEGER NOT NULL DEFAULT 0
)
"""


class BookRepository:
    """
    Example:
        repo = BookRepository(":memory:")
        repo.add(Book("Dune", "Frank Herbert"))
        repo.find_by_name("Dune")
    """

    def __init__(self, database: Union[str, os.PathLike] = ":memory:"):
        self.connection = sqlite3.connect(str(database))
        self.connection.execute(CREATE_TABLE)

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> 'BookRepository':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def add(self, book: Book) -> None:
        with self.connection:
            self.connection.execute(
                "INSERT INTO books (name, author, read) VALUES (?, ?, ?)",
                (book.name, book.author, int(book.read)),
            )
        logger.debug(f"Stored book {book.name!r}")

    def all(self) -> List[Book]:
        with closing(self.connection.execute("SELECT name, author, read FROM books ORDER BY id")) as cur:
            return [Book(name, author, bool(read)) for name, author, read in cur.fetchall()]

    def find_by_name(self, name: str) -> List[Book]:
        """Books whose name contains ``name``."""
        with closing(self.connection.execute(
            "SELECT name, author, read FROM books WHERE name LIKE ? ORDER BY id",
            (f"%{name}%",),
        )) as cur:
            return [Book(n, a, bool(r)) for n, a, r in cur.fetchall()]
