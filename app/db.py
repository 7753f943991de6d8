from contextlib import contextmanager
import logging
import os

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from utils import now_utc

# Retrieve main logger
logger = logging.getLogger("main")

db = SQLAlchemy()


def to_dict(db_results):
    return {c.name: getattr(db_results, c.name) for c in db_results.__table__.columns}


@contextmanager
def unit_of_work():
    """
    Scope a multi-step mutation to a single transaction.

    Commits when the block exits cleanly; rolls back and re-raises otherwise,
    so no partial write of the block is ever visible to other sessions.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def init_db(app):
    with app.app_context():
        # Ensure foreign keys, WAL mode, and timeout are set when connection is opened
        @event.listens_for(db.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            import sqlite3
            if not isinstance(dbapi_connection, sqlite3.Connection):
                return

            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON;")
            # Enable WAL mode for better concurrent access
            cursor.execute("PRAGMA journal_mode=WAL;")
            # Increase timeout to 30 seconds to handle contention
            cursor.execute("PRAGMA busy_timeout=30000;")
            cursor.close()

        url = app.config.get("SQLALCHEMY_DATABASE_URI", "")
        if url.startswith("sqlite:///"):
            db_dir = os.path.dirname(url[len("sqlite:///"):])
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)

        # Register models on the metadata before creating tables
        import models  # noqa: F401

        db.create_all()
        logger.info("Database tables initialized successfully")
