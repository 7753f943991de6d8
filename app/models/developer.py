"""
Model: Developer
"""

from db import db


class Developer(db.Model):
    __tablename__ = "developer"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), unique=True, nullable=False)
    founded_on = db.Column(db.Date)
    country = db.Column(db.String(100))
