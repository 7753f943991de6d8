"""
Rating aggregates for games.

The aggregate of a game is ``(average_score, review_count)``: the mean of its
non-null interaction scores (``None`` when there is none) and the number of
interactions it has, scored or not. Listings compute the aggregate for every
game in one grouped query (``GameRepository.summary_query``).
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func

from models.game import Game
from repositories.game_repository import GameRepository
from repositories.interaction_repository import InteractionRepository
from utils import isoformat_or_none


@dataclass(frozen=True)
class Aggregate:
    average_score: Optional[float]
    review_count: int

    def to_dict(self):
        return {"average_score": self.average_score, "review_count": self.review_count}


def average_of(scores: Iterable[Optional[int]]) -> Optional[float]:
    """Arithmetic mean of the non-null scores, or None if there are none"""
    present = [score for score in scores if score is not None]
    if not present:
        return None
    return sum(present) / len(present)


def _as_float(value):
    # AVG comes back as float on SQLite and Decimal on PostgreSQL
    return float(value) if value is not None else None


def summary_from_row(row) -> Dict:
    """Turn a summary query row into the listing view of a game"""
    return {
        "id": row.id,
        "name": row.name,
        "cover_image": row.cover_image,
        "release_date": isoformat_or_none(row.release_date),
        "average_score": _as_float(row.average_score),
        "review_count": int(row.review_count or 0),
    }


class RatingAggregator:
    """Computes aggregates for one game, and ranked or filtered summaries for all games"""

    @staticmethod
    def aggregate(game_id) -> Aggregate:
        average_score, review_count = InteractionRepository.aggregate_for_game(game_id)
        return Aggregate(_as_float(average_score), int(review_count or 0))

    # ------------------------------------------------------------------
    # Ranking keys
    # ------------------------------------------------------------------

    @staticmethod
    def top_rated_order():
        """Average descending with unscored games last, ties by ascending id"""
        average_score = GameRepository.average_score_column()
        return (
            GameRepository.nulls_last(average_score),
            average_score.desc(),
            Game.id.asc(),
        )

    @staticmethod
    def most_reviewed_order():
        """Review count descending, ties by ascending id"""
        return (
            GameRepository.review_count_column().desc(),
            Game.id.asc(),
        )

    # ------------------------------------------------------------------
    # Bulk views
    # ------------------------------------------------------------------

    def _summaries(self, filters=None, order_by=None, limit=None) -> List[Dict]:
        rows = GameRepository.get_summaries(filters=filters, order_by=order_by, limit=limit)
        return [summary_from_row(row) for row in rows]

    def all_games(self) -> List[Dict]:
        return self._summaries()

    def top_rated(self, limit: int) -> List[Dict]:
        return self._summaries(order_by=self.top_rated_order(), limit=limit)

    def most_reviewed(self, limit: int) -> List[Dict]:
        return self._summaries(order_by=self.most_reviewed_order(), limit=limit)

    def released_on_or_before(self, day, limit: int) -> List[Dict]:
        """Newest releases up to and including *day*"""
        return self._summaries(
            filters=[Game.release_date <= day],
            order_by=(Game.release_date.desc(), Game.id.asc()),
            limit=limit,
        )

    def released_after(self, day, limit: int) -> List[Dict]:
        """Soonest releases strictly after *day*"""
        return self._summaries(
            filters=[Game.release_date > day],
            order_by=(Game.release_date.asc(), Game.id.asc()),
            limit=limit,
        )

    def search(self, term: str) -> List[Dict]:
        """Case-insensitive substring match on the game name"""
        return self._summaries(
            filters=[func.lower(Game.name).contains(term.lower(), autoescape=True)],
            order_by=(Game.name.asc(), Game.id.asc()),
        )
