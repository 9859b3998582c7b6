"""Server-rendered management portal under ``/go``.

Every form posts to two twins: a traditional endpoint that answers with a
303 redirect carrying a flash message in the query string, and a fragment
endpoint (used by htmx) that answers with the re-rendered portal block.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from golinks import crud
from golinks.database import get_store
from golinks.errors import AlreadyExistsError, LinkValidationError, NotFoundError, StorageError
from golinks.responses import ALL_METHODS, internal_error, method_not_allowed, other_methods
from golinks.schemas import SQLITE_INT_MAX, SQLITE_INT_MIN, LinkId

logger = logging.getLogger("golinks.portal")

TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(prefix="/go", include_in_schema=False)


@dataclass
class LinkForm:
    path: str = ""
    url: str = ""
    id: int | None = None
    error: str | None = None
    error_field: str | None = None

    @property
    def is_edit(self) -> bool:
        return self.id is not None


def _portal_url(**flash) -> str:
    query = urlencode({k: v for k, v in flash.items() if v})
    return f"/go?{query}" if query else "/go"


def _links(store, query: str | None):
    try:
        return crud.list_links(store, query)
    except StorageError:
        logger.exception("Portal failed to list links")
        raise internal_error()


def _context(store, *, query=None, form=None, message=None, error=None) -> dict:
    return {
        "links": _links(store, query),
        "query": query or "",
        "form": form or LinkForm(),
        "message": message,
        "error": error,
    }


def _render_page(request: Request, store, status_code: int = 200, **kwargs):
    return templates.TemplateResponse(request, "manage.html", _context(store, **kwargs), status_code=status_code)


def _render_portal(request: Request, store, **kwargs):
    return templates.TemplateResponse(request, "partials/portal.html", _context(store, **kwargs))


def _failed_form(path: str, url: str, exc: Exception, link_id: int | None = None) -> LinkForm:
    if isinstance(exc, LinkValidationError):
        return LinkForm(path=path, url=url, id=link_id, error=exc.message, error_field=exc.field)
    return LinkForm(path=path, url=url, id=link_id, error=str(exc), error_field="path")


def _status_for(exc: Exception) -> int:
    return 409 if isinstance(exc, AlreadyExistsError) else 422


# ---------- full page ----------


@router.get("")
def manage(
    request: Request,
    q: str | None = None,
    msg: str | None = None,
    error: str | None = None,
    edit: int | None = Query(None, ge=SQLITE_INT_MIN, le=SQLITE_INT_MAX),
    store=Depends(get_store),
):
    form = None
    if edit is not None:
        try:
            link = crud.get_link(store, edit)
            form = LinkForm(path=link.path, url=link.url, id=link.id)
        except NotFoundError:
            error = error or "Link not found"
        except StorageError:
            logger.exception("Portal failed to load link %s", edit)
            raise internal_error()
    return _render_page(request, store, query=q, form=form, message=msg, error=error)


@router.post("/create")
def create(request: Request, path: str = Form(""), url: str = Form(""), store=Depends(get_store)):
    try:
        crud.create_link(store, path, url)
    except (LinkValidationError, AlreadyExistsError) as e:
        return _render_page(request, store, status_code=_status_for(e), form=_failed_form(path, url, e))
    except StorageError:
        logger.exception("Portal create failed")
        raise internal_error("Failed to create link")
    logger.info("Portal created link path=%s", path.strip())
    return RedirectResponse(_portal_url(msg=f"Created /{path.strip()}"), status_code=303)


@router.post("/update/{link_id}")
def update(request: Request, link_id: LinkId, path: str = Form(""), url: str = Form(""), store=Depends(get_store)):
    try:
        crud.update_link(store, link_id, path, url)
    except (LinkValidationError, AlreadyExistsError) as e:
        form = _failed_form(path, url, e, link_id=link_id)
        return _render_page(request, store, status_code=_status_for(e), form=form)
    except NotFoundError:
        return RedirectResponse(_portal_url(error="Link not found"), status_code=303)
    except StorageError:
        logger.exception("Portal update of %s failed", link_id)
        raise internal_error("Failed to update link")
    logger.info("Portal updated link id=%s path=%s", link_id, path.strip())
    return RedirectResponse(_portal_url(msg=f"Updated /{path.strip()}"), status_code=303)


@router.post("/delete/{link_id}")
def delete(link_id: LinkId, store=Depends(get_store)):
    try:
        crud.delete_link(store, link_id)
    except NotFoundError:
        return RedirectResponse(_portal_url(error="Link not found"), status_code=303)
    except StorageError:
        logger.exception("Portal delete of %s failed", link_id)
        raise internal_error("Failed to delete link")
    logger.info("Portal deleted link id=%s", link_id)
    return RedirectResponse(_portal_url(msg="Link deleted"), status_code=303)


# ---------- fragments ----------


@router.get("/fragments/links")
def search_fragment(request: Request, q: str | None = None, store=Depends(get_store)):
    return templates.TemplateResponse(
        request, "partials/link_rows.html", {"links": _links(store, q), "query": q or ""}
    )


@router.get("/fragments/new")
def new_fragment(request: Request):
    return templates.TemplateResponse(request, "partials/link_form.html", {"form": LinkForm()})


@router.get("/fragments/edit/{link_id}")
def edit_fragment(request: Request, link_id: LinkId, store=Depends(get_store)):
    try:
        link = crud.get_link(store, link_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Link not found")
    except StorageError:
        logger.exception("Portal failed to load link %s", link_id)
        raise internal_error()
    form = LinkForm(path=link.path, url=link.url, id=link.id)
    return templates.TemplateResponse(request, "partials/link_form.html", {"form": form})


# fragment writes carry the live search term as ``q`` so the re-rendered
# table stays filtered the way the search box says


@router.post("/fragments/create")
def create_fragment(
    request: Request, path: str = Form(""), url: str = Form(""), q: str = Form(""), store=Depends(get_store)
):
    try:
        crud.create_link(store, path, url)
    except (LinkValidationError, AlreadyExistsError) as e:
        return _render_portal(request, store, query=q, form=_failed_form(path, url, e))
    except StorageError:
        logger.exception("Portal create failed")
        raise internal_error("Failed to create link")
    logger.info("Portal created link path=%s", path.strip())
    return _render_portal(request, store, query=q, message=f"Created /{path.strip()}")


@router.post("/fragments/update/{link_id}")
def update_fragment(
    request: Request,
    link_id: LinkId,
    path: str = Form(""),
    url: str = Form(""),
    q: str = Form(""),
    store=Depends(get_store),
):
    try:
        crud.update_link(store, link_id, path, url)
    except (LinkValidationError, AlreadyExistsError) as e:
        return _render_portal(request, store, query=q, form=_failed_form(path, url, e, link_id=link_id))
    except NotFoundError:
        return _render_portal(request, store, query=q, error="Link not found")
    except StorageError:
        logger.exception("Portal update of %s failed", link_id)
        raise internal_error("Failed to update link")
    logger.info("Portal updated link id=%s path=%s", link_id, path.strip())
    return _render_portal(request, store, query=q, message=f"Updated /{path.strip()}")


@router.post("/fragments/delete/{link_id}")
def delete_fragment(request: Request, link_id: LinkId, q: str = Form(""), store=Depends(get_store)):
    try:
        crud.delete_link(store, link_id)
    except NotFoundError:
        return _render_portal(request, store, query=q, error="Link not found")
    except StorageError:
        logger.exception("Portal delete of %s failed", link_id)
        raise internal_error("Failed to delete link")
    logger.info("Portal deleted link id=%s", link_id)
    return _render_portal(request, store, query=q, message="Link deleted")


# ---------- method fallbacks ----------


def _reject_other_methods(path: str, *allowed: str) -> None:
    def reject():
        raise method_not_allowed(*allowed)

    router.add_api_route(path, reject, methods=other_methods(*allowed), name=f"reject {path}")


for _path in ("", "/fragments/links", "/fragments/new", "/fragments/edit/{link_id}"):
    _reject_other_methods(_path, "GET")

for _path in (
    "/create",
    "/update/{link_id}",
    "/delete/{link_id}",
    "/fragments/create",
    "/fragments/update/{link_id}",
    "/fragments/delete/{link_id}",
):
    _reject_other_methods(_path, "POST")


@router.api_route("/{rest:path}", methods=ALL_METHODS)
def portal_not_found(rest: str):
    raise HTTPException(status_code=404, detail="Not Found")
