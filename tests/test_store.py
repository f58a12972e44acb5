import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.catalog.schemas import BookFields, has_non_finite, is_blank
from app.catalog.store import BookNotFound, BookStore, InvalidBookInput


def test_seeded_store_has_two_books_in_order(store):
    books = store.list_books()
    assert [b.id for b in books] == ["1", "2"]
    assert books[0].title == "The Lord of the Rings"
    assert books[1].author == "Jane Austen"
    assert books[1].year == 1813


def test_generate_new_id_on_empty_store():
    assert BookStore().generate_new_id() == "1"


def test_generate_new_id_uses_last_record_not_max():
    store = BookStore([{"id": "7"}, {"id": "3"}])
    assert store.generate_new_id() == "4"


def test_generate_new_id_parses_leading_digits():
    assert BookStore([{"id": " 12abc"}]).generate_new_id() == "13"
    assert BookStore([{"id": 41}]).generate_new_id() == "42"
    assert BookStore([{"id": 5.9}]).generate_new_id() == "6"


def test_generate_new_id_parses_hex_prefix():
    assert BookStore([{"id": "0x10"}]).generate_new_id() == "17"
    assert BookStore([{"id": " -0XfF"}]).generate_new_id() == "-254"
    assert BookStore([{"id": "0x"}]).generate_new_id() == "NaN"


def test_generate_new_id_without_leading_integer_is_nan():
    assert BookStore([{"id": "abc"}]).generate_new_id() == "NaN"


def test_list_on_empty_store_raises_not_found():
    with pytest.raises(BookNotFound) as exc:
        BookStore().list_books()
    assert exc.value.message == "No books found"


def test_add_book_appends_with_new_id(store):
    book = store.add_book(BookFields(title="Dune", author="Herbert", year=1965))
    assert book.id == "3"
    assert len(store) == 3
    assert store.list_books()[-1] is book


def test_add_book_rejects_blank_fields(store):
    with pytest.raises(InvalidBookInput) as exc:
        store.add_book(BookFields(title="Dune", author="", year=0))
    assert exc.value.fields == ["author", "year"]
    assert len(store) == 2


def test_replace_checks_existence_before_fields(store):
    with pytest.raises(BookNotFound):
        store.replace_book("42", BookFields())


def test_replace_keeps_id_and_extra_fields(store):
    store.merge_book("1", {"genre": "fantasy"})
    book = store.replace_book("1", BookFields(title="T", author="A", year=2000))
    assert book.model_dump() == {
        "id": "1",
        "title": "T",
        "author": "A",
        "year": 2000,
        "genre": "fantasy",
    }


def test_merge_can_overwrite_id(store):
    store.merge_book("2", {"id": "9"})
    with pytest.raises(BookNotFound):
        store.get_book("2")
    assert store.get_book("9").title == "Pride and Prejudice"


def test_lookup_is_strict_on_id_type(store):
    store.merge_book("2", {"id": 5})
    with pytest.raises(BookNotFound):
        store.get_book("5")
    assert store.generate_new_id() == "6"


def test_delete_unknown_id_leaves_store_untouched(store):
    with pytest.raises(BookNotFound):
        store.delete_book("99")
    assert len(store) == 2


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, True),
        (False, True),
        ("", True),
        (0, True),
        (0.0, True),
        (float("nan"), True),
        ("0", False),
        (1813, False),
        ([], False),
        ({}, False),
        (True, False),
    ],
)
def test_is_blank(value, expected):
    assert is_blank(value) is expected


def test_add_book_rejects_infinity(store):
    with pytest.raises(InvalidBookInput) as exc:
        store.add_book(BookFields(title="a", author="b", year=math.inf))
    assert exc.value.fields == ["year"]
    assert len(store) == 2


def test_replace_rejects_infinity_and_keeps_book(store):
    before = store.get_book("1").model_dump()
    with pytest.raises(InvalidBookInput):
        store.replace_book("1", BookFields(title="a", author="b", year=-math.inf))
    assert store.get_book("1").model_dump() == before


def test_merge_rejects_nested_non_finite_values(store):
    before = store.get_book("2").model_dump()
    with pytest.raises(InvalidBookInput) as exc:
        store.merge_book("2", {"title": "ok", "ratings": [4.5, {"avg": math.nan}]})
    assert exc.value.fields == ["ratings"]
    assert store.get_book("2").model_dump() == before


@pytest.mark.parametrize(
    "value,expected",
    [
        (math.inf, True),
        (-math.inf, True),
        (math.nan, True),
        ([1, [2, math.inf]], True),
        ({"a": {"b": -math.inf}}, True),
        (1e308, False),
        ("Infinity", False),
        ({"a": [1, 2.5]}, False),
    ],
)
def test_has_non_finite(value, expected):
    assert has_non_finite(value) is expected


def test_concurrent_adds_get_unique_ids(store):
    def add(n):
        return store.add_book(BookFields(title=f"Book {n}", author="Anon", year=2000 + n))

    with ThreadPoolExecutor(max_workers=8) as pool:
        added = list(pool.map(add, range(200)))

    assert len(store) == 202
    ids = [b.id for b in store.list_books()]
    assert len(set(ids)) == len(ids)
    assert sorted(int(b.id) for b in added) == list(range(3, 203))
    # Insertion order follows id order since each id derives from the last record
    assert ids == [str(i) for i in range(1, 203)]
