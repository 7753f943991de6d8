"""
Repository for User database operations
"""

from db import db
from models.user import User


class UserRepository:
    """Repository for User database operations"""

    @staticmethod
    def get_by_id(id):
        """Get User by ID"""
        return db.session.get(User, id)

    @staticmethod
    def exists(id):
        """Check whether a User row exists for ID"""
        return db.session.query(User.id).filter(User.id == id).first() is not None

    @staticmethod
    def create(**kwargs):
        """Stage a new User record"""
        item = User(**kwargs)
        db.session.add(item)
        db.session.flush()
        return item
