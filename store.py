import itertools
import logging
from abc import ABC, abstractmethod
from numbers import Real
from threading import RLock
from typing import Iterable, List, Optional

from book import Book

logger = logging.getLogger(__name__)


SEED_BOOKS: List[dict] = [
    {"id": 1, "title": "Rich Dad Poor Dad", "author": "Robert Kiyosaki", "price": 9.99},
    {"id": 2, "title": "The Intelligent Investor", "author": "Benjamin Graham", "price": 14.99},
]


class BookIdRequiredError(ValueError):
    """Raised when a request that targets one book carries no numeric id."""

    def __init__(self, message: str = "Book ID is required") -> None:
        super().__init__(message)


class BookNotFoundError(LookupError):
    """Raised when no stored book matches the requested id."""

    def __init__(self, book_id: Real, message: str = "Book not found") -> None:
        super().__init__(message)
        self.book_id = book_id


class BookRepository(ABC):
    """Interface the API layer talks to; swap in a persistent backend here."""

    @abstractmethod
    def list_books(self) -> List[Book]:
        ...

    @abstractmethod
    def create_book(self, title: Optional[str] = None, author: Optional[str] = None,
                    price: Optional[Real] = None) -> Book:
        ...

    @abstractmethod
    def update_book(self, book: Book) -> Book:
        ...

    @abstractmethod
    def delete_book(self, book_id: Real) -> int:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryBookStore(BookRepository):
    """Keeps books in insertion order in a plain list shared by all requests.

    Every public method holds ``self._lock`` for its whole body, so a request
    is a single critical section over the list and the id counter.
    """

    def __init__(self, seed: Optional[Iterable[dict]] = None) -> None:
        self._lock = RLock()
        self._books: List[Book] = []
        self._ids = itertools.count(1)
        self.reset(SEED_BOOKS if seed is None else seed)

    # ------------------------- Repository operations ------------------------- #
    def list_books(self) -> List[Book]:
        with self._lock:
            return [book.copy() for book in self._books]

    def create_book(self, title: Optional[str] = None, author: Optional[str] = None,
                    price: Optional[Real] = None) -> Book:
        """Assign the next id and append. Callers never choose the id."""
        with self._lock:
            book = Book(id=next(self._ids), title=title, author=author, price=price)
            self.append(book)
            logger.info(f"Book created: id={book.id} title={book.title!r}")
            return book.copy()

    def update_book(self, book: Book) -> Book:
        """Replace the whole record matching ``book.id``."""
        with self._lock:
            index = self.find_index(book.id)
            if index is None:
                logger.warning(f"Update skipped, no book with id={book.id}")
                raise BookNotFoundError(book.id)
            self.replace_at(index, book.copy())
            logger.info(f"Book updated: id={book.id}")
            return book.copy()

    def delete_book(self, book_id: Real) -> int:
        with self._lock:
            removed = self.remove_where(book_id)
            if removed:
                logger.info(f"Book deleted: id={book_id}")
            else:
                logger.warning(f"Delete matched nothing: id={book_id}")
            return removed

    def reset(self, seed: Iterable[dict] = SEED_BOOKS) -> None:
        """Restore the given records and restart ids above the largest one."""
        with self._lock:
            self._books = [Book.from_dict(item) for item in seed]
            start = max((b.id for b in self._books), default=0) + 1
            self._ids = itertools.count(start)

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    # ------------------------- List primitives ------------------------- #
    def append(self, book: Book) -> None:
        with self._lock:
            self._books.append(book)

    def find_index(self, book_id: Real) -> Optional[int]:
        with self._lock:
            for index, book in enumerate(self._books):
                if book.id == book_id:
                    return index
            return None

    def replace_at(self, index: int, book: Book) -> None:
        with self._lock:
            self._books[index] = book

    def remove_where(self, book_id: Real) -> int:
        """Drop every record with ``book_id``; returns how many went away."""
        with self._lock:
            before = len(self._books)
            self._books = [b for b in self._books if b.id != book_id]
            return before - len(self._books)
