import subprocess
import sys
import webbrowser
from contextlib import contextmanager
from typing import Optional

import httpx
import typer
from rich.console import Console

from client import BookApiError, BookClient
from config import settings
from utils.ui_helpers import print_book_result, print_list_result, print_message_result, set_output_mode
from utils.validators import BookFieldsValidator

APP_NAME = "Book Inventory CLI"

console = Console()

# --- Typer CLI Uygulaması ---
app = typer.Typer(help=APP_NAME)


@app.callback()
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Çıktı formatı: plain | json | rich (varsayılan: plain)",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-u",
        help="Kitap API'sinin adresi (varsayılan: BOOK_API_URL veya host:port)",
    ),
):
    """CLI için genel seçenekler (ör. çıktı modu, API adresi)."""
    if output:
        set_output_mode(output)
    ctx.obj = {"base_url": base_url or settings.api_base_url}


@contextmanager
def _api_client(ctx: typer.Context):
    """API istemcisini aç; ağ ve API hatalarını CLI çıkış koduna çevir."""
    base_url = (ctx.obj or {}).get("base_url") or settings.api_base_url
    client = BookClient(base_url=base_url)
    try:
        yield client
    except httpx.RequestError as e:
        print(f"Could not reach the API at {base_url}: {e}")
        raise typer.Exit(code=1)
    except BookApiError as e:
        print(f"Error: {e.message}")
        raise typer.Exit(code=1)
    finally:
        client.close()


def _require_fields(title: str, author: str, price: float) -> None:
    if not BookFieldsValidator.is_complete(title, author, price):
        print(BookFieldsValidator.MISSING_FIELDS_MESSAGE)
        raise typer.Exit(code=1)


@app.command("list")
def cli_list(ctx: typer.Context):
    """Tüm kitapları listele."""
    with _api_client(ctx) as client:
        books = client.list_books()
    print_list_result(books)


@app.command("add")
def cli_add(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Kitap başlığı"),
    author: str = typer.Argument(..., help="Yazar"),
    price: float = typer.Argument(..., help="Fiyat"),
):
    """Yeni bir kitap ekle; kimliği sunucu atar."""
    _require_fields(title, author, price)
    with _api_client(ctx) as client:
        book = client.create_book(title.strip(), author.strip(), price)
    print_book_result(book, "Book Added")


@app.command("update")
def cli_update(
    ctx: typer.Context,
    book_id: int = typer.Argument(..., help="Güncellenecek kitabın kimliği"),
    title: str = typer.Argument(..., help="Yeni başlık"),
    author: str = typer.Argument(..., help="Yeni yazar"),
    price: float = typer.Argument(..., help="Yeni fiyat"),
):
    """Bir kitabı kimliğe göre tamamen güncelle."""
    _require_fields(title, author, price)
    with _api_client(ctx) as client:
        book = client.update_book(book_id, title.strip(), author.strip(), price)
    print_book_result(book, "Book Updated")


@app.command("delete")
def cli_delete(ctx: typer.Context, book_id: int = typer.Argument(..., help="Silinecek kitabın kimliği")):
    """Bir kitabı kimliğe göre sil."""
    with _api_client(ctx) as client:
        result = client.delete_book(book_id)
    print_message_result(result)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Dinlenecek adres"),
    port: Optional[int] = typer.Option(None, "--port", help="Dinlenecek port"),
    reload: bool = typer.Option(False, "--reload", help="Kod değişince yeniden yükle"),
    open_browser: bool = typer.Option(False, "--open", help="Arayüzü tarayıcıda aç"),
):
    """Web arayüzü ve API için Uvicorn sunucusunu başlatır."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    url = f"http://{host}:{port}/"
    console.print(f"[green]Starting web UI on [link={url}]{url}[/link][/]")

    if open_browser:
        try:
            webbrowser.open(url)
        except webbrowser.Error:
            console.print("[yellow]Web tarayıcısı otomatik olarak açılamadı.[/]")

    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
        "--log-level", settings.log_level.lower(),
    ]
    if reload:
        args.append("--reload")
    try:
        subprocess.run(args)
    except KeyboardInterrupt:
        console.print("[dim]Sunucu durduruldu[/]")


if __name__ == "__main__":
    app()
