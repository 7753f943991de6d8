"""
Catalog orchestration: cache-through game views, game and interaction writes.

Read operations consult the ViewCache first and compute on miss. Game writes
run in one unit of work and, only once it has committed, invalidate the
listing regions (plus the game's detail entry on update/delete).
Interaction writes never invalidate anything: rating-dependent views may
lag a new review by up to the cache TTL.
"""
import logging
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from constants import (
    ASSOCIATION_KINDS,
    GAME_LISTING_REGIONS,
    KIND_DEVELOPER,
    KIND_GENRE,
    KIND_PLATFORM,
    RANKING_DEFAULT_LIMIT,
    RANKING_MAX_LIMIT,
    RECENT_LIMIT,
    REGION_DETAIL,
    REGION_LISTING,
    REGION_MOST_POPULAR,
    REGION_RECENT,
    REGION_SEARCH,
    REGION_TOP_RATED,
    REGION_UPCOMING,
    UPCOMING_LIMIT,
)
from db import unit_of_work
from exceptions import BusinessRuleException, DuplicateResourceException, NotFoundException, ValidationException
from metrics import catalog_writes_total, duplicate_interaction_races_total
from repositories.game_repository import GameRepository
from repositories.interaction_repository import InteractionRepository
from repositories.user_repository import UserRepository
from utils import isoformat_or_none, now_utc, today_utc
from view_cache import UNIT_KEY, ViewCache

from .association_manager import AssociationManager, RESOURCE_NAMES
from .interaction_guard import CallerContext, InteractionGuard, duplicate_message
from .rating_aggregator import RatingAggregator

logger = logging.getLogger("main")


def interaction_to_dict(interaction) -> Dict:
    return {
        "id": interaction.id,
        "user_id": interaction.user_id,
        "game_id": interaction.game_id,
        "score": interaction.score,
        "review": interaction.review,
        "played": bool(interaction.played),
        "interacted_at": isoformat_or_none(interaction.interacted_at),
    }


class CatalogService:
    """Public catalog operations composed from the aggregator, association manager, guard and cache."""

    def __init__(
        self,
        cache: ViewCache,
        aggregator: Optional[RatingAggregator] = None,
        associations: Optional[AssociationManager] = None,
        guard: Optional[InteractionGuard] = None,
        settings: Optional[Dict] = None,
        today: Callable = today_utc,
    ) -> None:
        self.cache = cache
        self.aggregator = aggregator or RatingAggregator()
        self.associations = associations or AssociationManager()
        self.guard = guard or InteractionGuard()
        self._today = today

        listings = (settings or {}).get("listings", {})
        self.recent_limit = int(listings.get("recent_limit", RECENT_LIMIT))
        self.upcoming_limit = int(listings.get("upcoming_limit", UPCOMING_LIMIT))
        self.ranking_default_limit = int(listings.get("ranking_default_limit", RANKING_DEFAULT_LIMIT))
        self.ranking_max_limit = int(listings.get("ranking_max_limit", RANKING_MAX_LIMIT))

    # ------------------------------------------------------------------
    # Cache-through reads
    # ------------------------------------------------------------------

    def list_games(self) -> List[Dict]:
        return self.cache.get_or_load(REGION_LISTING, UNIT_KEY, self.aggregator.all_games)

    def get_recent(self) -> List[Dict]:
        return self.cache.get_or_load(
            REGION_RECENT, UNIT_KEY,
            lambda: self.aggregator.released_on_or_before(self._today(), self.recent_limit),
        )

    def get_upcoming(self) -> List[Dict]:
        return self.cache.get_or_load(
            REGION_UPCOMING, UNIT_KEY,
            lambda: self.aggregator.released_after(self._today(), self.upcoming_limit),
        )

    def get_top_rated(self, limit: Optional[int] = None) -> List[Dict]:
        limit = self._ranking_limit(limit)
        return self.cache.get_or_load(REGION_TOP_RATED, limit, lambda: self.aggregator.top_rated(limit))

    def get_most_popular(self, limit: Optional[int] = None) -> List[Dict]:
        limit = self._ranking_limit(limit)
        return self.cache.get_or_load(REGION_MOST_POPULAR, limit, lambda: self.aggregator.most_reviewed(limit))

    def search(self, term: str) -> List[Dict]:
        if term is None or not str(term).strip():
            raise ValidationException("Search term cannot be blank")
        return self.cache.get_or_load(REGION_SEARCH, term, lambda: self.aggregator.search(term))

    def get_game_detail(self, game_id: int) -> Dict:
        return self.cache.get_or_load(REGION_DETAIL, game_id, lambda: self._build_detail(game_id))

    def get_game_aggregate(self, game_id: int) -> Dict:
        """Live aggregate for one game, bypassing the cache"""
        self._require_game(game_id)
        return self.aggregator.aggregate(game_id).to_dict()

    def _ranking_limit(self, limit):
        if limit is None:
            return self.ranking_default_limit
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ValidationException("Limit must be an integer")
        if not 1 <= limit <= self.ranking_max_limit:
            raise ValidationException(f"Limit must be between 1 and {self.ranking_max_limit}")
        return limit

    def _require_game(self, game_id):
        game = GameRepository.get_by_id(game_id)
        if game is None:
            raise NotFoundException("Game", game_id)
        return game

    def _build_detail(self, game_id) -> Dict:
        game = self._require_game(game_id)
        aggregate = self.aggregator.aggregate(game_id)
        return {
            "id": game.id,
            "name": game.name,
            "description": game.description,
            "cover_image": game.cover_image,
            "release_date": isoformat_or_none(game.release_date),
            "platforms": self.associations.names_for_game(game_id, KIND_PLATFORM),
            "developers": self.associations.names_for_game(game_id, KIND_DEVELOPER),
            "genres": self.associations.names_for_game(game_id, KIND_GENRE),
            "average_score": aggregate.average_score,
            "review_count": aggregate.review_count,
        }

    # ------------------------------------------------------------------
    # Game writes
    # ------------------------------------------------------------------

    @staticmethod
    def _check_game_spec(spec) -> None:
        associations = spec.associations()
        for kind in ASSOCIATION_KINDS:
            if not associations.get(kind):
                raise BusinessRuleException(f"A game needs at least one {RESOURCE_NAMES[kind].lower()}")

    def _invalidate_game_views(self, game_id=None) -> None:
        self.cache.evict_regions(GAME_LISTING_REGIONS)
        if game_id is not None:
            self.cache.evict(REGION_DETAIL, game_id)

    def create_game(self, spec) -> Dict:
        self._check_game_spec(spec)
        with unit_of_work():
            resolved = self.associations.resolve_all(spec.associations())
            game = GameRepository.create(**spec.fields())
            self.associations.apply_resolved(game.id, resolved)
            game_id = game.id

        self._invalidate_game_views()
        catalog_writes_total.labels(entity="game", operation="create").inc()
        logger.info(f"Game {game_id} created: {spec.name}")
        return self.get_game_detail(game_id)

    def update_game(self, game_id: int, spec) -> Dict:
        with unit_of_work():
            self._require_game(game_id)
            self._check_game_spec(spec)
            resolved = self.associations.resolve_all(spec.associations())
            GameRepository.update(game_id, **spec.fields())
            self.associations.apply_resolved(game_id, resolved)

        self._invalidate_game_views(game_id)
        catalog_writes_total.labels(entity="game", operation="update").inc()
        logger.info(f"Game {game_id} updated")
        return self.get_game_detail(game_id)

    def delete_game(self, game_id: int) -> None:
        with unit_of_work():
            self._require_game(game_id)
            removed = self.associations.cascade_delete_game(game_id)
            GameRepository.delete(game_id)

        self._invalidate_game_views(game_id)
        catalog_writes_total.labels(entity="game", operation="delete").inc()
        logger.info(f"Game {game_id} deleted (cascade: {removed})")

    # ------------------------------------------------------------------
    # Interaction writes (no cache invalidation)
    # ------------------------------------------------------------------

    def create_interaction(self, user_id: int, spec) -> Dict:
        self.guard.check_create(user_id, spec.game_id, spec.score, spec.review)
        if not UserRepository.exists(user_id):
            raise NotFoundException("User", user_id)
        if not GameRepository.exists(spec.game_id):
            raise NotFoundException("Game", spec.game_id)

        try:
            with unit_of_work():
                interaction = InteractionRepository.create(
                    user_id=user_id,
                    game_id=spec.game_id,
                    score=spec.score,
                    review=spec.review,
                    played=bool(spec.played),
                    interacted_at=now_utc(),
                )
                result = interaction_to_dict(interaction)
        except IntegrityError as e:
            # Lost the race against a concurrent insert for the same pair
            if InteractionRepository.exists_for(user_id, spec.game_id):
                duplicate_interaction_races_total.inc()
                logger.warning(f"Duplicate interaction race for user {user_id}, game {spec.game_id}")
                raise DuplicateResourceException(duplicate_message(user_id, spec.game_id)) from e
            raise

        catalog_writes_total.labels(entity="interaction", operation="create").inc()
        logger.info(f"Interaction {result['id']} created by user {user_id} for game {spec.game_id}")
        return result

    def _require_interaction(self, interaction_id):
        interaction = InteractionRepository.get_by_id(interaction_id)
        if interaction is None:
            raise NotFoundException("Interaction", interaction_id)
        return interaction

    def update_interaction(self, caller: CallerContext, interaction_id: int, spec) -> Dict:
        with unit_of_work():
            interaction = self._require_interaction(interaction_id)
            self.guard.check_update(interaction.user_id, caller, spec.score, spec.review)
            InteractionRepository.update(
                interaction_id,
                score=spec.score,
                review=spec.review,
                played=bool(spec.played),
                interacted_at=now_utc(),
            )
            result = interaction_to_dict(interaction)

        catalog_writes_total.labels(entity="interaction", operation="update").inc()
        logger.info(f"Interaction {interaction_id} updated by user {caller.user_id}")
        return result

    def delete_interaction(self, caller: CallerContext, interaction_id: int) -> None:
        with unit_of_work():
            interaction = self._require_interaction(interaction_id)
            self.guard.ensure_can_modify(interaction.user_id, caller, action="delete")
            InteractionRepository.delete(interaction_id)

        catalog_writes_total.labels(entity="interaction", operation="delete").inc()
        logger.info(f"Interaction {interaction_id} deleted by user {caller.user_id}")

    # ------------------------------------------------------------------
    # Interaction reads (uncached)
    # ------------------------------------------------------------------

    def get_interaction(self, interaction_id: int) -> Dict:
        return interaction_to_dict(self._require_interaction(interaction_id))

    def list_interactions_for_game(self, game_id: int) -> List[Dict]:
        self._require_game(game_id)
        return [interaction_to_dict(item) for item in InteractionRepository.get_by_game(game_id)]

    def list_interactions_for_user(self, user_id: int) -> List[Dict]:
        return [interaction_to_dict(item) for item in InteractionRepository.get_by_user(user_id)]

    def list_played_games(self, user_id: int) -> List[Dict]:
        return [interaction_to_dict(item) for item in InteractionRepository.get_played_by_user(user_id)]

    def get_user_interaction(self, user_id: int, game_id: int) -> Dict:
        interaction = InteractionRepository.get_by_user_and_game(user_id, game_id)
        if interaction is None:
            raise NotFoundException("Interaction", f"user {user_id} and game {game_id}", field="key")
        return interaction_to_dict(interaction)
