from pathlib import Path

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def make_engine(db_path: str | Path) -> Engine:
    """SQLite engine for the links database file.

    One engine per process; request handlers run on a thread pool, hence
    ``check_same_thread=False``. ``timeout`` is how long a writer waits for
    the file lock held by another writer.
    """
    return create_engine(
        f"sqlite:///{Path(db_path).as_posix()}",
        connect_args={"check_same_thread": False, "timeout": 15},
    )


def init_db(engine: Engine) -> None:
    # models must be imported so the table is registered on Base.metadata
    from golinks import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_store(request: Request):
    """FastAPI dependency returning the store built at startup."""
    return request.app.state.store
