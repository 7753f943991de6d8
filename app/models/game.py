"""
Model: Game
"""

from db import db


class Game(db.Model):
    __tablename__ = "game"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False, default="")
    cover_image = db.Column(db.String(512))
    release_date = db.Column(db.Date, nullable=False, index=True)
