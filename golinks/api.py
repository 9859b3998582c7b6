import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from golinks import crud
from golinks.database import get_store
from golinks.errors import AlreadyExistsError, LinkValidationError, NotFoundError, StorageError
from golinks.responses import ALL_METHODS, internal_error, method_not_allowed, other_methods
from golinks.schemas import HealthOut, LinkId, LinkIn, LinkOut

logger = logging.getLogger("golinks.api")

router = APIRouter(prefix="/api", tags=["links"])


@router.get("/health", response_model=HealthOut)
def health(store=Depends(get_store)):
    try:
        count = len(store.get_all())
    except StorageError:
        logger.exception("Health check failed")
        raise internal_error()
    return {"status": "ok", "links": count}


@router.get("/links", response_model=list[LinkOut])
def list_links(store=Depends(get_store)):
    try:
        return crud.list_links(store)
    except StorageError:
        logger.exception("API list links failed")
        raise internal_error()


@router.post("/links", status_code=201, response_class=Response)
def create_link(link_in: LinkIn, store=Depends(get_store)):
    try:
        new_id = crud.create_link(store, link_in.path, link_in.url)
    except LinkValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except AlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError:
        logger.exception("API create link failed")
        raise internal_error("Failed to create link")
    logger.info("Created link id=%s path=%s target=%s", new_id, link_in.path.strip(), link_in.url.strip())
    return Response(status_code=201)


@router.put("/links/{link_id}", response_class=Response)
def update_link(link_id: LinkId, link_in: LinkIn, store=Depends(get_store)):
    try:
        crud.update_link(store, link_id, link_in.path, link_in.url)
    except LinkValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Link not found")
    except AlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StorageError:
        logger.exception("API update link %s failed", link_id)
        raise internal_error("Failed to update link")
    logger.info("Updated link id=%s path=%s target=%s", link_id, link_in.path.strip(), link_in.url.strip())
    return Response(status_code=200)


@router.delete("/links/{link_id}", status_code=204, response_class=Response)
def delete_link(link_id: LinkId, store=Depends(get_store)):
    try:
        crud.delete_link(store, link_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Link not found")
    except StorageError:
        logger.exception("API delete link %s failed", link_id)
        raise internal_error("Failed to delete link")
    logger.info("Deleted link id=%s", link_id)
    return Response(status_code=204)


@router.api_route("/links", methods=other_methods("GET", "POST"), include_in_schema=False)
def links_collection_other():
    raise method_not_allowed("GET", "POST")


@router.api_route("/links/{link_id}", methods=other_methods("PUT", "DELETE"), include_in_schema=False)
def links_item_other(link_id: LinkId):
    raise method_not_allowed("PUT", "DELETE")


@router.api_route("/{rest:path}", methods=ALL_METHODS, include_in_schema=False)
def api_not_found(rest: str):
    raise HTTPException(status_code=404, detail="Not Found")
