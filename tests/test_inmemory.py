from concurrent.futures import ThreadPoolExecutor

import pytest

from linkshort.errors import ConflictError, NotFoundError
from linkshort.inmemory import InMemoryRepository
from linkshort.model import URL


def test_save_and_get_url():
    repo = InMemoryRepository()
    data = URL(
        original_url="https://loooooooooooooooooooooooooooooooooooooooooooooooooooooooooooooo.ng/",
        short_url="Lu8S545",
    )
    repo.save_url(data)
    url = repo.get_url(data.short_url)
    assert url.original_url == data.original_url


def test_save_assigns_sequential_ids():
    repo = InMemoryRepository()
    first = URL(original_url="https://example.com/a", short_url="a1")
    second = URL(original_url="https://example.com/b", short_url="b2")
    repo.save_url(first)
    repo.save_url(second)
    assert (first.id, second.id) == (1, 2)
    assert repo.get_url("b2").id == 2


def test_duplicate_short_url_conflicts():
    repo = InMemoryRepository()
    repo.save_url(URL(original_url="https://example.com", short_url="abc"))
    with pytest.raises(ConflictError) as info:
        repo.save_url(URL(original_url="https://example.com/other", short_url="abc"))
    assert str(info.value) == "short url already exists"


def test_custom_url_is_used_for_conflict_lookup():
    repo = InMemoryRepository()
    repo.save_url(URL(original_url="https://example.com", short_url="mine"))
    with pytest.raises(ConflictError):
        repo.save_url(URL(original_url="https://example.com", short_url="zz", custom_url="mine"))


def test_get_missing_raises_not_found():
    repo = InMemoryRepository()
    with pytest.raises(NotFoundError, match="failed to get original url"):
        repo.get_url("missing")


def test_returned_record_is_a_copy():
    repo = InMemoryRepository()
    repo.save_url(URL(original_url="https://example.com", short_url="abc"))
    got = repo.get_url("abc")
    got.original_url = "https://changed.example.com"
    assert repo.get_url("abc").original_url == "https://example.com"


def test_increment_counter_sequence():
    repo = InMemoryRepository()
    assert [repo.increment_counter() for _ in range(3)] == [1, 2, 3]


def test_increment_counter_is_unique_across_threads():
    repo = InMemoryRepository()
    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(repo.increment_counter) for _ in range(1600)]
        results = [future.result() for future in futures]
    assert sorted(results) == list(range(1, 1601))