import uuid

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from radio_settlement.config import DATABASE_URL


def enable_sqlite_savepoints(engine: Engine) -> Engine:
	"""Let SQLAlchemy own BEGIN on pysqlite so SAVEPOINT / ROLLBACK behave.

	pysqlite defers BEGIN until the first DML statement, which breaks nested
	transactions and full rollback of reads-then-writes units of work.

	Transactions start with BEGIN IMMEDIATE: SQLite has no row locks, and two
	deferred transactions that both read before writing deadlock with
	"database is locked". Taking the write lock up front makes concurrent
	settlements queue (up to the driver busy timeout) instead; the later one
	then hits the unique key and increments the existing playlist row.
	"""
	if engine.dialect.name != "sqlite":
		return engine

	@event.listens_for(engine, "connect")
	def _on_connect(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
		dbapi_connection.isolation_level = None

	@event.listens_for(engine, "begin")
	def _on_begin(conn):  # type: ignore[no-untyped-def]
		conn.exec_driver_sql("BEGIN IMMEDIATE")

	return engine


engine = enable_sqlite_savepoints(create_engine(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

class Base(DeclarativeBase):
	pass


def new_id() -> str:
	"""Default primary key for rows created by the service."""
	return str(uuid.uuid4())
