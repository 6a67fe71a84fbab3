"""SQLite SQLAlchemy key-value store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from memory.schemas import Base, KeyValueRecord
from memory.stores.kv_store import KeyValueStore


class SQLStore(KeyValueStore):
    """Provides SQLAlchemy-backed key-value persistence in a SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(f"sqlite+pysqlite:///{self.db_path}", future=True)
        self._session_factory = sessionmaker(bind=self.engine, future=True)

    def create_all(self) -> None:
        """Create all schema tables if missing."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager that commits on success and rolls back on error."""
        sess = self._session_factory()
        try:
            yield sess
            sess.commit()
        except Exception:
            sess.rollback()
            raise
        finally:
            sess.close()

    def get(self, key: str) -> str | None:
        with self.session() as sess:
            record = sess.get(KeyValueRecord, key)
            return record.value if record is not None else None

    def set(self, key: str, value: str) -> None:
        with self.session() as sess:
            record = sess.get(KeyValueRecord, key)
            if record is None:
                sess.add(KeyValueRecord(key=key, value=value))
            else:
                record.value = value
