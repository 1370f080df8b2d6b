"""
SQL injection demo: the ``Book`` record and a parameterized repository.

The string-built query counterpart lives in the test corpus only.
"""

from sqli.book import Book
from sqli.repository import BookRepository

__all__ = ["Book", "BookRepository"]
