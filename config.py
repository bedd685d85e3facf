import logging
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # API Ayarları
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: List[str] = field(
        default_factory=lambda: [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    )
    static_dir: str = os.getenv("STATIC_DIR", "static")

    # Uygulama Ayarları
    app_name: str = os.getenv("APP_NAME", "Book Inventory API")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "False")
    environment: str = os.getenv("ENVIRONMENT", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Depo Ayarları
    seed_books: bool = _env_flag("SEED_BOOKS", "True")

    # CLI İstemci Ayarları
    api_base_url: str = os.getenv("BOOK_API_URL", "")
    client_timeout: float = float(os.getenv("BOOK_API_TIMEOUT", "10"))

    def __post_init__(self) -> None:
        if not self.api_base_url:
            self.api_base_url = f"http://{self.api_host}:{self.api_port}"


def configure_logging(level: str | None = None) -> None:
    """Kök logger'ı yapılandırılmış seviyeyle kur."""
    name = (level or settings.log_level).upper()
    if settings.debug:
        name = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
