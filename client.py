import logging
from numbers import Real
from typing import Any, Dict, List, Optional

import httpx

from book import Book
from config import settings

logger = logging.getLogger(__name__)


class BookApiError(Exception):
    """Kitap API'sinden dönen 4xx/5xx yanıtı."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class BookClient:
    """Kitap API'si için senkron HTTP istemcisi"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.BaseTransport] = None,
                 http_client: Optional[httpx.Client] = None) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        # Dışarıdan verilen istemci (ör. TestClient) burada kapatılmaz
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or settings.client_timeout),
            transport=transport,
        )

    def _request(self, method: str, json: Optional[Dict[str, Any]] = None) -> Any:
        response = self._client.request(method, "/books", json=json)
        logger.debug(f"{method} /books -> {response.status_code}")
        if response.status_code >= 400:
            raise BookApiError(response.status_code, self._error_message(response))
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            if "error" in body:
                return str(body["error"])
            if "detail" in body:
                return str(body["detail"])
        return str(body)

    def list_books(self) -> List[Book]:
        """Tüm kitapları getir"""
        return [Book.from_dict(item) for item in self._request("GET")]

    def create_book(self, title: str, author: str, price: Real) -> Book:
        """Yeni kitap oluştur; kimliği sunucu atar"""
        return Book.from_dict(self._request("POST", {"title": title, "author": author, "price": price}))

    def update_book(self, book_id: int, title: str, author: str, price: Real) -> Book:
        """Kitabı tamamen değiştir"""
        payload = {"id": book_id, "title": title, "author": author, "price": price}
        return Book.from_dict(self._request("PUT", payload))

    def delete_book(self, book_id: int) -> Dict[str, Any]:
        """Kitabı sil; onay mesajını döndürür"""
        return self._request("DELETE", {"id": book_id})

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "BookClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
