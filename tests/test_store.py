import threading

import pytest

from book import Book
from store import SEED_BOOKS, BookNotFoundError, InMemoryBookStore


def test_seeded_in_insertion_order(store):
    books = store.list_books()
    assert [b.id for b in books] == [1, 2]
    assert books[0].title == "Rich Dad Poor Dad"
    assert books[1].price == 14.99


def test_empty_seed():
    empty = InMemoryBookStore(seed=[])
    assert empty.list_books() == []
    assert empty.create_book("A", "B", 1).id == 1


def test_create_appends_with_next_id(store):
    book = store.create_book(title="Dune", author="Frank Herbert", price=12.5)
    assert book.id == 3
    assert store.list_books()[-1] == book
    assert len(store) == 3


def test_create_ids_never_repeat(store):
    ids = [store.create_book(title=f"Book {i}").id for i in range(50)]
    assert len(set(ids)) == 50
    assert min(ids) > 2


def test_create_keeps_omitted_fields_none(store):
    book = store.create_book(title="Only Title")
    assert book.author is None
    assert book.price is None


def test_list_returns_copies(store):
    books = store.list_books()
    books[0].title = "Changed outside"
    books.clear()
    assert store.list_books()[0].title == "Rich Dad Poor Dad"
    assert len(store) == 2


def test_update_replaces_whole_record(store):
    updated = store.update_book(Book(id=1, title="New Title"))
    assert updated.title == "New Title"
    assert updated.author is None
    assert updated.price is None
    assert store.list_books()[0] == Book(id=1, title="New Title")


def test_update_unknown_id_leaves_store_unchanged(store):
    before = store.list_books()
    with pytest.raises(BookNotFoundError, match="Book not found"):
        store.update_book(Book(id=999, title="Ghost", author="Nobody", price=1))
    assert store.list_books() == before


def test_delete_removes_only_matching(store):
    created = store.create_book("X", "Y", 5)
    assert store.delete_book(created.id) == 1
    assert [b.id for b in store.list_books()] == [1, 2]


def test_delete_unknown_id_is_noop(store):
    assert store.delete_book(12345) == 0
    assert len(store) == 2


def test_remove_where_drops_every_duplicate(store):
    store.append(Book(id=1, title="Duplicate"))
    assert store.remove_where(1) == 2
    assert [b.id for b in store.list_books()] == [2]


def test_find_index_and_replace_at(store):
    assert store.find_index(2) == 1
    assert store.find_index(42) is None
    store.replace_at(1, Book(id=2, title="Replaced"))
    assert store.list_books()[1].title == "Replaced"


def test_reset_restores_seed_and_counter(store):
    store.create_book("X", "Y", 5)
    store.delete_book(1)
    store.reset()
    assert [b.to_dict() for b in store.list_books()] == SEED_BOOKS
    assert store.create_book("Z").id == 3


def test_concurrent_creates_get_unique_ids(store):
    created = []
    lock = threading.Lock()

    def worker():
        for _ in range(100):
            book = store.create_book(title="t", author="a", price=1)
            with lock:
                created.append(book.id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ids = [b.id for b in store.list_books()]
    assert len(ids) == 2 + 800
    assert len(set(ids)) == len(ids)
    assert sorted(created) == sorted(ids[2:])
