"""
Model: GameDeveloper
"""

from db import db


class GameDeveloper(db.Model):
    __tablename__ = "game_developer"
    __table_args__ = (db.UniqueConstraint("game_id", "developer_id", name="uq_game_developer"),)

    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey("game.id", ondelete="CASCADE"), nullable=False, index=True)
    developer_id = db.Column(db.Integer, db.ForeignKey("developer.id", ondelete="CASCADE"), nullable=False, index=True)
