"""
Model: User
"""

from db import db, now_utc
from flask_login import UserMixin


class User(UserMixin, db.Model):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    admin_access = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=now_utc)

    @property
    def is_admin(self):
        return bool(self.admin_access)

    def has_admin_access(self):
        return self.is_admin

    def has_access(self, access):
        if access == "admin":
            return self.has_admin_access()
        elif access == "user":
            return True
        return False
