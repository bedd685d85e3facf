from __future__ import annotations

from numbers import Real


class Book:
    """Represents a single book item in the inventory."""

    def __init__(self, id: int, title: str | None = None, author: str | None = None,
                 price: Real | None = None) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.price = price

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (#{self.id}, {self.price})"

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r}, price={self.price!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def copy(self) -> "Book":
        return Book(id=self.id, title=self.title, author=self.author, price=self.price)

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "author": self.author, "price": self.price}

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(id=data["id"], title=data.get("title"), author=data.get("author"), price=data.get("price"))
