"""Book record used by the SQL injection demo."""

from dataclasses import dataclass


@dataclass
class Book:
    name: str
    author: str
    read: bool = False
