from __future__ import annotations

from typing import Generator
from contextlib import contextmanager
import logging

from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Database:
	"""Engine plus session factory for one database URL.

	Built explicitly and handed to whatever needs data access; there is no
	module-level engine.
	"""

	def __init__(self, url: str, echo: bool = False) -> None:
		self.url = url
		kwargs = {}
		if url.startswith("sqlite"):
			kwargs["connect_args"] = {"check_same_thread": False}
			if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
				# One shared connection so every session sees the same in-memory DB
				kwargs["poolclass"] = StaticPool
		self.engine: Engine = create_engine(url, echo=echo, **kwargs)
		if url.startswith("sqlite"):
			event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

	@classmethod
	def in_memory(cls) -> "Database":
		return cls("sqlite://")

	def create_all(self) -> None:
		"""Create all SQLModel tables that do not exist yet."""
		# Ensure models are imported so metadata has all tables
		import zzpadmin.data.models  # noqa: F401

		SQLModel.metadata.create_all(self.engine)
		logger.debug("Schema ready on %s", self.engine.url)

	def get_session(self) -> Session:
		"""New Session; expire_on_commit=False keeps attribute values on detached rows."""
		return Session(self.engine, expire_on_commit=False)

	@contextmanager
	def session_scope(self) -> Generator[Session, None, None]:
		"""Transaction per block: commit on success, rollback and re-raise on error.

		Usage:
			with db.session_scope() as s:
				... use s ...
		"""
		session = self.get_session()
		try:
			yield session
			session.commit()
		except Exception:
			session.rollback()
			raise
		finally:
			session.close()

	def dispose(self) -> None:
		self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
	cursor = dbapi_connection.cursor()
	cursor.execute("PRAGMA foreign_keys=ON")
	cursor.close()
