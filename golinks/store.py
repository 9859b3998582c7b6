"""SQLAlchemy-backed persistence for links."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager

from sqlalchemy import delete, exists, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from golinks.database import init_db
from golinks.errors import AlreadyExistsError, NotFoundError, StorageError
from golinks.models import Link

logger = logging.getLogger("golinks.store")


def _is_unique_violation(exc: IntegrityError) -> bool:
    return getattr(exc.orig, "sqlite_errorcode", None) == sqlite3.SQLITE_CONSTRAINT_UNIQUE


class LinkStore:
    """Owns the ``links`` table.

    Every method runs in its own short session; nothing is held open between
    calls. Path uniqueness is left to the UNIQUE constraint so that two
    concurrent writers cannot both succeed.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        init_db(engine)
        self._sessions = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    @contextmanager
    def _session(self):
        session: Session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        self.engine.dispose()

    # ---------- reads ----------

    def get_by_path(self, path: str) -> Link:
        try:
            with self._session() as s:
                link = s.execute(select(Link).where(Link.path == path)).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        if link is None:
            raise NotFoundError(f"no link for path '{path}'")
        return link

    def get(self, id: int) -> Link:
        try:
            with self._session() as s:
                link = s.get(Link, id)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        if link is None:
            raise NotFoundError(f"link with id {id} not found")
        return link

    def get_all(self) -> list[Link]:
        try:
            with self._session() as s:
                return list(s.execute(select(Link).order_by(Link.path.asc())).scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def exists(self, id: int) -> bool:
        try:
            with self._session() as s:
                return bool(s.execute(select(exists().where(Link.id == id))).scalar())
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    # ---------- writes ----------

    def create(self, path: str, url: str) -> int:
        try:
            with self._session() as s:
                link = Link(path=path, url=url)
                s.add(link)
                s.flush()
                new_id = link.id
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise AlreadyExistsError(path) from e
            raise StorageError(str(e)) from e
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        logger.debug("inserted link id=%s path=%s", new_id, path)
        return new_id

    def update(self, id: int, path: str, url: str) -> None:
        """Rewrite path and url of ``id``. A missing id is not reported."""
        try:
            with self._session() as s:
                s.execute(update(Link).where(Link.id == id).values(path=path, url=url))
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise AlreadyExistsError(path) from e
            raise StorageError(str(e)) from e
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def delete(self, id: int) -> None:
        try:
            with self._session() as s:
                result = s.execute(delete(Link).where(Link.id == id))
                removed = result.rowcount
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        if removed == 0:
            raise NotFoundError(f"link with id {id} not found")
