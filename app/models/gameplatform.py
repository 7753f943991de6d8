"""
Model: GamePlatform
"""

from db import db


class GamePlatform(db.Model):
    __tablename__ = "game_platform"
    __table_args__ = (db.UniqueConstraint("game_id", "platform_id", name="uq_game_platform"),)

    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey("game.id", ondelete="CASCADE"), nullable=False, index=True)
    platform_id = db.Column(db.Integer, db.ForeignKey("platform.id", ondelete="CASCADE"), nullable=False, index=True)
