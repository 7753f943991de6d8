"""
Model: Interaction

A user's relationship to a game: optional score, optional review text and
the played flag. At most one row per (user, game), backed by a unique
constraint so concurrent inserts cannot both commit.
"""

from db import db
from utils import now_utc


class Interaction(db.Model):
    __tablename__ = "interaction"
    __table_args__ = (db.UniqueConstraint("user_id", "game_id", name="uq_interaction_user_game"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    game_id = db.Column(db.Integer, db.ForeignKey("game.id", ondelete="CASCADE"), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=True)
    review = db.Column(db.String(1000), nullable=True)
    played = db.Column(db.Boolean, nullable=False, default=False)
    interacted_at = db.Column(db.DateTime, nullable=False, default=now_utc)
