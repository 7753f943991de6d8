"""
Repository for Game database operations
"""

from sqlalchemy import case, distinct, func
from db import db
from models.game import Game
from models.interaction import Interaction


class GameRepository:
    """Repository for Game database operations"""

    @staticmethod
    def get_by_id(id):
        """Get Game by ID"""
        return db.session.get(Game, id)

    @staticmethod
    def exists(id):
        """Check whether a Game row exists for ID"""
        return db.session.query(Game.id).filter(Game.id == id).first() is not None

    @staticmethod
    def create(**kwargs):
        """Stage a new Game record and flush to obtain its ID"""
        item = Game(**kwargs)
        db.session.add(item)
        db.session.flush()
        return item

    @staticmethod
    def update(id, **kwargs):
        """Replace the given fields on a Game record"""
        item = db.session.get(Game, id)
        if not item:
            return None

        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)

        db.session.flush()
        return item

    @staticmethod
    def delete(id):
        """Delete Game record"""
        item = db.session.get(Game, id)
        if not item:
            return False

        db.session.delete(item)
        db.session.flush()
        return True

    @staticmethod
    def count():
        """Count total Game records"""
        return db.session.query(func.count(Game.id)).scalar()

    # ------------------------------------------------------------------
    # Grouped summary query
    # ------------------------------------------------------------------

    @staticmethod
    def average_score_column():
        """AVG over non-null scores; NULL when the group has none"""
        return func.avg(Interaction.score)

    @staticmethod
    def review_count_column():
        """Interactions per game, counted by distinct interaction id"""
        return func.count(distinct(Interaction.id))

    @staticmethod
    def summary_query():
        """
        One grouped query yielding every game with its aggregate:
        (id, name, cover_image, release_date, average_score, review_count)

        Callers add filters, ordering and limits; the aggregate is always
        computed in the same pass, never per game.
        """
        average_score = GameRepository.average_score_column().label("average_score")
        review_count = GameRepository.review_count_column().label("review_count")
        return (
            db.session.query(
                Game.id,
                Game.name,
                Game.cover_image,
                Game.release_date,
                average_score,
                review_count,
            )
            .outerjoin(Interaction, Interaction.game_id == Game.id)
            .group_by(Game.id, Game.name, Game.cover_image, Game.release_date)
        )

    @staticmethod
    def get_summaries(filters=None, order_by=None, limit=None):
        """Run the summary query with optional filters, ordering and limit"""
        query = GameRepository.summary_query()
        for criterion in filters or ():
            query = query.filter(criterion)
        query = query.order_by(*(order_by or (Game.id.asc(),)))
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def nulls_last(expression):
        """Portable NULLS LAST: sorts rows whose expression is NULL after the rest"""
        return case((expression.is_(None), 1), else_=0)
