import logging
import math
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional, Union

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, ValidationError

from book import Book
from config import configure_logging, settings
from store import SEED_BOOKS, BookIdRequiredError, BookNotFoundError, BookRepository, InMemoryBookStore
from utils.validators import BookIdValidator

logger = logging.getLogger(__name__)

# JSON dışı NaN ve Infinity değerleri reddedilir
Price = Union[StrictInt, Annotated[StrictFloat, Field(allow_inf_nan=False)]]


# --- Modeller ---
class BookModel(BaseModel):
    id: int
    title: str | None = None
    author: str | None = None
    price: Price | None = None


class BookCreateModel(BaseModel):
    # İstemcinin gönderdiği id ve bilinmeyen alanlar yok sayılır
    model_config = ConfigDict(extra="ignore")

    title: StrictStr | None = None
    author: StrictStr | None = None
    price: Price | None = None


class DeleteResponseModel(BaseModel):
    message: str
    id: Price


class HealthModel(BaseModel):
    status: str
    timestamp: str
    total_books: int


# --- Bağımlılıklar ---
def get_store(request: Request) -> BookRepository:
    """Uygulamaya bağlı kitap deposunu döndür."""
    return request.app.state.store


def _validate_fields(payload: Dict[str, Any]) -> BookCreateModel:
    try:
        return BookCreateModel.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e


# --- Kitap Uç Noktaları ---
router = APIRouter()


@router.get("/books", response_model=List[BookModel])
def list_books(store: BookRepository = Depends(get_store)):
    """Tüm kitapları ekleme sırasıyla döndür."""
    return [b.to_dict() for b in store.list_books()]


@router.post("/books", response_model=BookModel, status_code=201)
def create_book(payload: BookCreateModel, store: BookRepository = Depends(get_store)):
    """Yeni bir kitap ekle. Kimlik her zaman sunucu tarafından atanır."""
    book = store.create_book(title=payload.title, author=payload.author, price=payload.price)
    return book.to_dict()


@router.put("/books", response_model=BookModel)
def update_book(payload: Dict[str, Any] = Body(...), store: BookRepository = Depends(get_store)):
    """Kimliğe göre kitabı tamamen değiştir; gönderilmeyen alanlar null olur.

    Kimlik kontrolü alan türü doğrulamasından önce yapılır.
    """
    book_id = BookIdValidator.require(payload.get("id"))
    fields = _validate_fields(payload)
    book = Book(id=book_id, title=fields.title, author=fields.author, price=fields.price)
    return store.update_book(book).to_dict()


@router.delete("/books", response_model=DeleteResponseModel)
def delete_book(payload: Dict[str, Any] = Body(...), store: BookRepository = Depends(get_store)):
    """Kimliği eşleşen tüm kayıtları sil. Eşleşme olmasa da başarılı döner."""
    book_id = BookIdValidator.require(payload.get("id"))
    store.delete_book(book_id)
    return {"message": "Book deleted", "id": book_id}


@router.get("/health", response_model=HealthModel)
def health(store: BookRepository = Depends(get_store)):
    """Hafif sağlık kontrolü uç noktası."""
    now_iso = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return {"status": "healthy", "timestamp": now_iso, "total_books": len(store)}


# --- Hata İşleyicileri ---
async def book_id_required_handler(request: Request, exc: BookIdRequiredError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def book_not_found_handler(request: Request, exc: BookNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc)})


def _json_safe(value: Any) -> Any:
    """NaN/Infinity gibi JSON'a yazılamayan sayıları dizeye çevir."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Hatalı girdi yanıtta geri gösterilir; sonlu olmayan sayılar render'ı bozmamalı
    return JSONResponse(status_code=422, content={"detail": _json_safe(jsonable_encoder(exc.errors()))})


def _static_path() -> Path:
    path = Path(settings.static_dir)
    if not path.is_absolute():
        path = Path(__file__).resolve().parent / path
    return path


# --- Uygulama Fabrikası ---
def create_app(store: Optional[BookRepository] = None) -> FastAPI:
    """Verilen depo etrafında bir FastAPI uygulaması oluştur.

    Depo verilmezse ayarlara göre tohumlanmış bir bellek içi depo kullanılır.
    """
    configure_logging()
    if store is None:
        store = InMemoryBookStore(seed=SEED_BOOKS if settings.seed_books else [])

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.app_name} başlatıldı ({len(app.state.store)} kitap)")
        yield
        logger.info(f"{settings.app_name} kapatılıyor")

    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug, lifespan=lifespan)
    app.state.store = store

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Güvenlik Başlıkları Ara Katmanı ---
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        # Kitap listesi her istekte değişebilir, önbelleğe alınmamalı
        if request.url.path == "/books":
            response.headers["Cache-Control"] = "no-store"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    app.add_exception_handler(BookIdRequiredError, book_id_required_handler)
    app.add_exception_handler(BookNotFoundError, book_not_found_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(router)

    # --- Statik Dosyalar ---
    static_dir = _static_path()
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

        @app.get("/", include_in_schema=False)
        def read_root():
            """Ana HTML sayfasını sun."""
            return FileResponse(str(static_dir / "index.html"))
    else:
        logger.warning(f"Statik dizin bulunamadı: {static_dir}")

    return app


app = create_app()
