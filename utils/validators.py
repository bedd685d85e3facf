import math
from numbers import Real
from typing import Any, Optional

from store import BookIdRequiredError


class BookIdValidator:
    """Checks the ``id`` field of update and delete payloads.

    Only finite JSON numbers count, so NaN and Infinity are rejected. Booleans
    are rejected even though ``bool`` is an ``int`` subclass. Integral floats
    such as ``3.0`` become ``3``.
    """

    @staticmethod
    def is_numeric(value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, Real):
            return False
        return math.isfinite(value)

    @staticmethod
    def normalize(value: Real) -> Real:
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @staticmethod
    def require(value: Any) -> Real:
        if not BookIdValidator.is_numeric(value):
            raise BookIdRequiredError()
        return BookIdValidator.normalize(value)


class BookFieldsValidator:
    """Client side checks used before sending a create or update."""

    MISSING_FIELDS_MESSAGE = "Please fill in all fields: Title, Author, and Price."

    @staticmethod
    def _is_filled(text: Optional[str]) -> bool:
        return text is not None and bool(text.strip())

    @staticmethod
    def is_complete(title: Optional[str], author: Optional[str], price: Optional[Real]) -> bool:
        if not BookFieldsValidator._is_filled(title) or not BookFieldsValidator._is_filled(author):
            return False
        return BookIdValidator.is_numeric(price)
