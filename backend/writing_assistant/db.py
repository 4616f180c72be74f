from __future__ import annotations
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker, declarative_base
from .settings import settings


DATABASE_URL = settings.database_url or "sqlite:///./app.db"

# SQLite connections are shared between the request threadpool and the event loop
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, future=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()

# Columns added after the first release: table -> [(column, DDL type)]
ADDED_COLUMNS = {
	"auth_users": [
		("email", "VARCHAR(256)"),
		("requests_used", "INTEGER DEFAULT 0 NOT NULL"),
		("requests_limit", "INTEGER DEFAULT 1000 NOT NULL"),
	],
	"review_records": [
		("anchors_json", "TEXT"),
	],
}


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


def ensure_schema(bind=None) -> list[str]:
	"""Add missing columns to tables created by older versions.

	Lightweight stand-in for migrations; only ever adds nullable or defaulted
	columns. Returns the "table.column" names that were added.
	"""
	bind = bind if bind is not None else engine
	inspector = inspect(bind)
	tables = set(inspector.get_table_names())
	added: list[str] = []
	for table, columns in ADDED_COLUMNS.items():
		if table not in tables:
			continue
		existing = {c["name"] for c in inspector.get_columns(table)}
		missing = [(name, ddl) for name, ddl in columns if name not in existing]
		if not missing:
			continue
		with bind.begin() as conn:
			for name, ddl in missing:
				conn.exec_driver_sql(f"ALTER TABLE {table} ADD COLUMN {name} {ddl}")
				added.append(f"{table}.{name}")
	return added
