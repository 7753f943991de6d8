"""
Model: Platform
"""

from db import db


class Platform(db.Model):
    __tablename__ = "platform"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    release_year = db.Column(db.Integer)
    manufacturer = db.Column(db.String(100))
    logo_image = db.Column(db.String(512))
