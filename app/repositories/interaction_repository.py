"""
Repository for Interaction database operations
"""

from sqlalchemy import distinct, func
from db import db
from models.interaction import Interaction


class InteractionRepository:
    """Repository for Interaction database operations"""

    @staticmethod
    def get_by_id(id):
        """Get Interaction by ID"""
        return db.session.get(Interaction, id)

    @staticmethod
    def exists_for(user_id, game_id):
        """Check whether the user already has an Interaction for the game"""
        return (
            db.session.query(Interaction.id)
            .filter(Interaction.user_id == user_id, Interaction.game_id == game_id)
            .first()
            is not None
        )

    @staticmethod
    def get_by_user_and_game(user_id, game_id):
        """Get the Interaction of a user with a game"""
        return Interaction.query.filter_by(user_id=user_id, game_id=game_id).first()

    @staticmethod
    def get_by_user(user_id):
        """Get all Interactions of a user"""
        return Interaction.query.filter_by(user_id=user_id).order_by(Interaction.id.asc()).all()

    @staticmethod
    def get_by_game(game_id):
        """Get all Interactions of a game, newest first"""
        return (
            Interaction.query.filter_by(game_id=game_id)
            .order_by(Interaction.interacted_at.desc(), Interaction.id.desc())
            .all()
        )

    @staticmethod
    def get_played_by_user(user_id):
        """Get Interactions where the user marked the game as played"""
        return (
            Interaction.query.filter_by(user_id=user_id, played=True)
            .order_by(Interaction.id.asc())
            .all()
        )

    @staticmethod
    def aggregate_for_game(game_id):
        """Return (average of non-null scores, interaction count) for one game"""
        return (
            db.session.query(func.avg(Interaction.score), func.count(distinct(Interaction.id)))
            .filter(Interaction.game_id == game_id)
            .one()
        )

    @staticmethod
    def create(**kwargs):
        """Stage a new Interaction and flush so constraint violations surface here"""
        item = Interaction(**kwargs)
        db.session.add(item)
        db.session.flush()
        return item

    @staticmethod
    def update(id, **kwargs):
        """Replace the given fields on an Interaction"""
        item = db.session.get(Interaction, id)
        if not item:
            return None

        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)

        db.session.flush()
        return item

    @staticmethod
    def delete(id):
        """Delete Interaction record"""
        item = db.session.get(Interaction, id)
        if not item:
            return False

        db.session.delete(item)
        db.session.flush()
        return True

    @staticmethod
    def delete_for_game(game_id):
        """Delete every Interaction referencing a game, returning the row count"""
        deleted = Interaction.query.filter_by(game_id=game_id).delete(synchronize_session=False)
        db.session.flush()
        return deleted
