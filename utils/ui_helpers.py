import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# CLI çıktı modunu kontrol eden ortam değişkeni
# İzin verilen değerler: 'plain' (varsayılan), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOK_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def _format_price(price: Any) -> str:
    if price is None:
        return "-"
    return f"${price}"


def print_list_result(books: List[Any]) -> None:
    """Kitap listesini mevcut çıktı moduna göre yazdır.
    - plain: '#id - Title by Author ($price)' satırları, veya 'No books in inventory.'
    - json: id, title, author, price içeren JSON dizisi
    - rich: Rich tablosu
    """
    mode = get_output_mode()

    if not books:
        print("No books in inventory.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Price", style="green", justify="right")
        for b in books:
            table.add_row(str(b.id), escape(b.title or ""), escape(b.author or ""), _format_price(b.price))
        _console.print(table)
    else:
        for b in books:
            print(f"#{b.id} - {b.title} by {b.author} ({_format_price(b.price)})")


def print_book_result(book: Any, heading: str) -> None:
    """Tek bir kitabı mevcut çıktı moduna göre yazdır."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]ID:[/] {book.id}\n[bold]Title:[/] {escape(str(book.title))}\n"
            f"[bold]Author:[/] {escape(str(book.author))}\n[bold]Price:[/] {_format_price(book.price)}"
        )
        _console.print(Panel.fit(content, title=heading, border_style="green"))
    else:
        print(heading)
        print(f"ID: {book.id}")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")
        print(f"Price: {_format_price(book.price)}")


def print_message_result(payload: Dict[str, Any]) -> None:
    """API onay mesajını yazdır (ör. silme)."""
    if get_output_mode() == "json":
        print(json.dumps(payload, ensure_ascii=False))
    else:
        print(f"{payload.get('message')} (id: {payload.get('id')})")
