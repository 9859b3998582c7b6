from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

import pytest

from golinks.database import make_engine
from golinks.errors import AlreadyExistsError, NotFoundError
from golinks.store import LinkStore


def test_create_and_get_by_path(store):
    new_id = store.create("g", "https://google.com")

    link = store.get_by_path("g")
    assert link.id == new_id
    assert link.url == "https://google.com"


def test_get_by_path_is_case_sensitive(store):
    store.create("Docs", "https://docs.example.com")

    with pytest.raises(NotFoundError):
        store.get_by_path("docs")


def test_get_by_path_missing(store):
    with pytest.raises(NotFoundError):
        store.get_by_path("nope")


def test_get_by_id(store):
    new_id = store.create("wiki", "https://wiki.example.com")
    assert store.get(new_id).path == "wiki"
    with pytest.raises(NotFoundError):
        store.get(new_id + 100)


def test_get_all_ordered_by_path(store):
    store.create("zeta", "https://z.example.com")
    store.create("alpha", "https://a.example.com")
    store.create("mid", "https://m.example.com")

    assert [link.path for link in store.get_all()] == ["alpha", "mid", "zeta"]


def test_get_all_empty(store):
    assert store.get_all() == []


def test_ids_increase(store):
    first = store.create("a", "https://a.example.com")
    second = store.create("b", "https://b.example.com")
    assert second > first > 0


def test_duplicate_path_raises_already_exists(store):
    store.create("g", "https://google.com")

    with pytest.raises(AlreadyExistsError) as exc_info:
        store.create("g", "https://bing.com")

    assert exc_info.value.path == "g"
    assert store.get_by_path("g").url == "https://google.com"
    assert len(store.get_all()) == 1


def test_update_changes_path_and_url(store):
    new_id = store.create("g", "https://google.com")

    store.update(new_id, "search", "https://duckduckgo.com")

    link = store.get(new_id)
    assert (link.path, link.url) == ("search", "https://duckduckgo.com")
    with pytest.raises(NotFoundError):
        store.get_by_path("g")


def test_update_collision_keeps_both_rows(store):
    a = store.create("a", "https://a.example.com")
    b = store.create("b", "https://b.example.com")

    with pytest.raises(AlreadyExistsError):
        store.update(b, "a", "https://other.example.com")

    assert (store.get(a).path, store.get(a).url) == ("a", "https://a.example.com")
    assert (store.get(b).path, store.get(b).url) == ("b", "https://b.example.com")


def test_update_missing_id_is_silent(store):
    store.update(999, "x", "https://x.example.com")
    assert store.get_all() == []


def test_exists(store):
    new_id = store.create("g", "https://google.com")
    assert store.exists(new_id) is True
    assert store.exists(new_id + 1) is False


def test_delete(store):
    new_id = store.create("g", "https://google.com")

    store.delete(new_id)

    assert store.exists(new_id) is False
    with pytest.raises(NotFoundError):
        store.delete(new_id)


def test_deleted_id_is_not_reused(store):
    store.create("a", "https://a.example.com")
    last = store.create("b", "https://b.example.com")
    store.delete(last)

    again = store.create("c", "https://c.example.com")

    assert again > last


def test_concurrent_creates_same_path(db_file):
    # separate stores so each writer has its own connection, as under a worker pool
    stores = [LinkStore(make_engine(db_file)) for _ in range(2)]
    barrier = Barrier(len(stores))

    def attempt(i):
        barrier.wait()
        try:
            stores[i].create("race", f"https://{i}.example.com")
            return "ok"
        except AlreadyExistsError:
            return "conflict"

    try:
        with ThreadPoolExecutor(max_workers=len(stores)) as pool:
            results = sorted(pool.map(attempt, range(len(stores))))
        assert results == ["conflict", "ok"]
        assert [link.path for link in stores[0].get_all()] == ["race"]
    finally:
        for s in stores:
            s.close()


def test_concurrent_creates_through_one_store(store):
    barrier = Barrier(8)

    def attempt(i):
        barrier.wait()
        try:
            store.create("shared", f"https://{i}.example.com")
            return True
        except AlreadyExistsError:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, range(8)))

    assert results.count(True) == 1
    assert results.count(False) == 7
    assert len(store.get_all()) == 1
