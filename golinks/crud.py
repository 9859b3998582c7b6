"""Link operations shared by the JSON API and the portal.

Both surfaces call these functions and nothing else for writes, so a path or
url accepted by one is accepted by the other.
"""

from golinks.errors import NotFoundError
from golinks.models import Link
from golinks.store import LinkStore
from golinks.validation import validate_link


def create_link(store: LinkStore, path: str | None, url: str | None) -> int:
    clean_path, clean_url = validate_link(path, url)
    return store.create(clean_path, clean_url)


def update_link(store: LinkStore, link_id: int, path: str | None, url: str | None) -> None:
    clean_path, clean_url = validate_link(path, url)
    if not store.exists(link_id):
        raise NotFoundError(f"link with id {link_id} not found")
    store.update(link_id, clean_path, clean_url)


def delete_link(store: LinkStore, link_id: int) -> None:
    store.delete(link_id)


def get_link(store: LinkStore, link_id: int) -> Link:
    return store.get(link_id)


def list_links(store: LinkStore, query: str | None = None) -> list[Link]:
    links = store.get_all()
    term = (query or "").strip().lower()
    if not term:
        return links
    return [link for link in links if term in link.path.lower() or term in link.url.lower()]


def resolve(store: LinkStore, alias: str) -> str:
    return store.get_by_path(alias).url
