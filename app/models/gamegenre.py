"""
Model: GameGenre
"""

from db import db


class GameGenre(db.Model):
    __tablename__ = "game_genre"
    __table_args__ = (db.UniqueConstraint("game_id", "genre_id", name="uq_game_genre"),)

    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey("game.id", ondelete="CASCADE"), nullable=False, index=True)
    genre_id = db.Column(db.Integer, db.ForeignKey("genre.id", ondelete="CASCADE"), nullable=False, index=True)
