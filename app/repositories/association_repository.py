"""
Repository for the game <-> platform/developer/genre join rows.

Relations are reached explicitly by id through ``find_associations_by_game``
and ``find_associations_by_target``; nothing is lazily loaded.
"""

from collections import namedtuple

from constants import KIND_DEVELOPER, KIND_GENRE, KIND_PLATFORM
from db import db
from models.gamedeveloper import GameDeveloper
from models.gamegenre import GameGenre
from models.gameplatform import GamePlatform

JoinSpec = namedtuple("JoinSpec", ["model", "target_column"])

JOIN_SPECS = {
    KIND_PLATFORM: JoinSpec(GamePlatform, "platform_id"),
    KIND_DEVELOPER: JoinSpec(GameDeveloper, "developer_id"),
    KIND_GENRE: JoinSpec(GameGenre, "genre_id"),
}


def _spec(kind):
    try:
        return JOIN_SPECS[kind]
    except KeyError:
        raise ValueError(f"Unknown association kind: {kind}")


class AssociationRepository:
    """Repository for association (join) rows, keyed by kind"""

    @staticmethod
    def find_associations_by_game(game_id, kind):
        """Target ids linked to a game, in insertion order, without repeats"""
        spec = _spec(kind)
        target = getattr(spec.model, spec.target_column)
        rows = (
            db.session.query(target)
            .filter(spec.model.game_id == game_id)
            .order_by(spec.model.id.asc())
            .all()
        )
        seen = set()
        ids = []
        for (target_id,) in rows:
            if target_id not in seen:
                seen.add(target_id)
                ids.append(target_id)
        return ids

    @staticmethod
    def find_associations_by_target(kind, target_id):
        """Game ids linked to a platform/developer/genre"""
        spec = _spec(kind)
        target = getattr(spec.model, spec.target_column)
        rows = (
            db.session.query(spec.model.game_id)
            .filter(target == target_id)
            .distinct()
            .order_by(spec.model.game_id.asc())
            .all()
        )
        return [game_id for (game_id,) in rows]

    @staticmethod
    def delete_for_game(game_id, kind):
        """Delete every join row of one kind for a game"""
        spec = _spec(kind)
        deleted = spec.model.query.filter(spec.model.game_id == game_id).delete(synchronize_session=False)
        db.session.flush()
        return deleted

    @staticmethod
    def delete_for_target(kind, target_id):
        """Delete every join row pointing at a platform/developer/genre"""
        spec = _spec(kind)
        target = getattr(spec.model, spec.target_column)
        deleted = spec.model.query.filter(target == target_id).delete(synchronize_session=False)
        db.session.flush()
        return deleted

    @staticmethod
    def insert_for_game(game_id, kind, target_ids):
        """Insert one join row per target id"""
        spec = _spec(kind)
        for target_id in target_ids:
            db.session.add(spec.model(**{"game_id": game_id, spec.target_column: target_id}))
        db.session.flush()

    @staticmethod
    def replace_for_game(game_id, kind, target_ids):
        """Delete the existing rows of one kind for a game, then insert the new set"""
        AssociationRepository.delete_for_game(game_id, kind)
        AssociationRepository.insert_for_game(game_id, kind, target_ids)
