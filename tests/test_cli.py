import json

import httpx
import pytest
from typer.testing import CliRunner
from unittest.mock import patch, MagicMock

import main
from client import BookClient
from main import app

runner = CliRunner()


@pytest.fixture
def api(client, monkeypatch):
    # CLI'yi gerçek sunucu yerine TestClient'a bağla
    factory = MagicMock(side_effect=lambda base_url=None: BookClient(base_url=base_url, http_client=client))
    monkeypatch.setattr(main, "BookClient", factory)
    return factory


def test_list_books(api):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "#1 - Rich Dad Poor Dad by Robert Kiyosaki ($9.99)" in result.stdout
    assert "#2 - The Intelligent Investor by Benjamin Graham ($14.99)" in result.stdout


def test_list_json_output(api):
    result = runner.invoke(app, ["--output", "json", "list"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [b["id"] for b in payload] == [1, 2]


def test_list_empty(api, store):
    store.reset([])
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No books in inventory." in result.stdout


def test_base_url_option_passed_to_client(api):
    result = runner.invoke(app, ["--base-url", "http://example.test:9000", "list"])
    assert result.exit_code == 0
    api.assert_called_once_with(base_url="http://example.test:9000")


def test_add_book(api, store):
    result = runner.invoke(app, ["add", "Dune", "Frank Herbert", "12.5"])
    assert result.exit_code == 0
    assert "Book Added" in result.stdout
    assert "Title: Dune" in result.stdout
    assert store.list_books()[-1].title == "Dune"


def test_add_book_blank_title(api, store):
    result = runner.invoke(app, ["add", " ", "Frank Herbert", "12.5"])
    assert result.exit_code == 1
    assert "Please fill in all fields: Title, Author, and Price." in result.stdout
    assert len(store) == 2


def test_update_book(api, store):
    result = runner.invoke(app, ["update", "1", "Rich Dad", "R. Kiyosaki", "10"])
    assert result.exit_code == 0
    assert "Book Updated" in result.stdout
    assert store.list_books()[0].author == "R. Kiyosaki"


def test_update_book_not_found(api):
    result = runner.invoke(app, ["update", "999", "X", "Y", "1"])
    assert result.exit_code == 1
    assert "Error: Book not found" in result.stdout


def test_delete_book(api, store):
    result = runner.invoke(app, ["delete", "2"])
    assert result.exit_code == 0
    assert "Book deleted (id: 2)" in result.stdout
    assert [b.id for b in store.list_books()] == [1]


def test_unreachable_api(monkeypatch):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    monkeypatch.setattr(
        main, "BookClient",
        lambda base_url=None: BookClient(base_url=base_url, transport=httpx.MockTransport(refuse)),
    )
    result = runner.invoke(app, ["--base-url", "http://down.test", "list"])
    assert result.exit_code == 1
    assert "Could not reach the API at http://down.test" in result.stdout


@patch('subprocess.run')
@patch('webbrowser.open')
def test_serve_command(mock_webbrowser_open, mock_subprocess_run):
    result = runner.invoke(app, ["serve", "--host", "0.0.0.0", "--port", "9001", "--open"])
    assert result.exit_code == 0
    assert "Starting web UI on" in result.stdout
    mock_webbrowser_open.assert_called_once_with("http://0.0.0.0:9001/")
    args = mock_subprocess_run.call_args[0][0]
    assert "uvicorn" in args
    assert "api:app" in args
    assert args[args.index("--host") + 1] == "0.0.0.0"
    assert args[args.index("--port") + 1] == "9001"
    assert "--reload" not in args


@patch('subprocess.run')
@patch('webbrowser.open')
def test_serve_without_browser(mock_webbrowser_open, mock_subprocess_run):
    result = runner.invoke(app, ["serve", "--reload"])
    assert result.exit_code == 0
    mock_webbrowser_open.assert_not_called()
    assert "--reload" in mock_subprocess_run.call_args[0][0]
