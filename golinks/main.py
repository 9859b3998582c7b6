import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from golinks import __version__, api, crud, portal
from golinks.config import Settings
from golinks.database import get_store, make_engine
from golinks.errors import NotFoundError, StorageError
from golinks.responses import ALL_METHODS, internal_error, method_not_allowed, register_exception_handlers
from golinks.store import LinkStore

logger = logging.getLogger("golinks")

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Serving links from %s", app.state.settings.db_path)
    yield
    app.state.store.close()


def create_app(settings: Settings | None = None, store: LinkStore | None = None) -> FastAPI:
    """Build the application around one store.

    Routes are registered in matching order: portal, API, favicon, then the
    catch-all alias redirect.
    """
    settings = settings or Settings()
    if store is None:
        store = LinkStore(make_engine(settings.db_path))

    app = FastAPI(
        title="Go Links",
        description="Short path aliases that redirect to full URLs.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    register_exception_handlers(app)

    app.mount("/go/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.include_router(portal.router)
    app.include_router(api.router)

    @app.get("/favicon.ico", include_in_schema=False)
    def favicon():
        return Response(status_code=404)

    @app.api_route("/{alias:path}", methods=ALL_METHODS, include_in_schema=False)
    def redirect_alias(alias: str, request: Request, store=Depends(get_store)):
        if request.method != "GET":
            raise method_not_allowed("GET")
        try:
            url = crud.resolve(store, alias)
        except NotFoundError:
            logger.info("No link found for alias: %s", alias)
            raise HTTPException(status_code=404, detail="No link found")
        except StorageError:
            logger.exception("Lookup of alias %s failed", alias)
            raise internal_error()
        logger.debug("Redirecting /%s -> %s", alias, url)
        return RedirectResponse(url=url, status_code=302)

    return app
