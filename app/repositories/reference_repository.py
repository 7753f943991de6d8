"""
Shared database operations for the reference entities a game links to
(platforms, developers, genres). Each is uniquely keyed by name.
"""

from sqlalchemy import func
from db import db


class ReferenceRepository:
    """Base repository; subclasses set ``model``"""

    model = None

    @classmethod
    def get_all(cls):
        """Get all records ordered by name"""
        return cls.model.query.order_by(cls.model.name.asc(), cls.model.id.asc()).all()

    @classmethod
    def get_by_id(cls, id):
        """Get record by ID"""
        return db.session.get(cls.model, id)

    @classmethod
    def get_by_ids(cls, ids):
        """Get records by a list of IDs"""
        if not ids:
            return []
        return cls.model.query.filter(cls.model.id.in_(list(ids))).all()

    @classmethod
    def get_by_name(cls, name):
        """Get record by exact name"""
        return cls.model.query.filter(cls.model.name == name).first()

    @classmethod
    def search_by_name(cls, term):
        """Case-insensitive contains match on name"""
        return (
            cls.model.query.filter(func.lower(cls.model.name).contains(term.lower(), autoescape=True))
            .order_by(cls.model.name.asc(), cls.model.id.asc())
            .all()
        )

    @classmethod
    def get_names_by_ids(cls, ids):
        """Map id -> name for the given IDs"""
        if not ids:
            return {}
        rows = db.session.query(cls.model.id, cls.model.name).filter(cls.model.id.in_(list(ids))).all()
        return {row.id: row.name for row in rows}

    @classmethod
    def create(cls, **kwargs):
        """Stage a new record"""
        item = cls.model(**kwargs)
        db.session.add(item)
        db.session.flush()
        return item

    @classmethod
    def update(cls, id, **kwargs):
        """Replace the given fields on a record"""
        item = db.session.get(cls.model, id)
        if not item:
            return None

        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)

        db.session.flush()
        return item

    @classmethod
    def delete(cls, id):
        """Delete record"""
        item = db.session.get(cls.model, id)
        if not item:
            return False

        db.session.delete(item)
        db.session.flush()
        return True
