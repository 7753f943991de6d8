"""Maintains the game <-> platform/developer/genre link sets."""
import logging
from typing import Dict, Iterable, List

from constants import ASSOCIATION_KINDS, KIND_DEVELOPER, KIND_GENRE, KIND_PLATFORM
from exceptions import BusinessRuleException, NotFoundException
from repositories.association_repository import AssociationRepository
from repositories.developer_repository import DeveloperRepository
from repositories.genre_repository import GenreRepository
from repositories.interaction_repository import InteractionRepository
from repositories.platform_repository import PlatformRepository
from utils import dedupe_preserving_order

logger = logging.getLogger("main")

TARGET_REPOSITORIES = {
    KIND_PLATFORM: PlatformRepository,
    KIND_DEVELOPER: DeveloperRepository,
    KIND_GENRE: GenreRepository,
}

RESOURCE_NAMES = {
    KIND_PLATFORM: "Platform",
    KIND_DEVELOPER: "Developer",
    KIND_GENRE: "Genre",
}


class AssociationManager:
    """
    Full-replace maintenance of association sets.

    Rules
    -----
    * ``set_associations`` deletes every link of the kind for the game and
      inserts the given ids; it never merges with the previous set.
    * Every target id is resolved before anything is written. One unknown id
      fails the whole call with ``NotFoundException``.
    * Repeated ids collapse to one link (first occurrence keeps its place).
    * Writes are flushed, not committed: callers run this inside
      ``db.unit_of_work`` so the replace is atomic for concurrent readers.
    """

    @staticmethod
    def _check_kind(kind):
        if kind not in TARGET_REPOSITORIES:
            raise BusinessRuleException(f"Unknown association kind '{kind}'")

    def resolve(self, kind: str, target_ids: Iterable[int]) -> List[int]:
        """Return the deduplicated ids, raising NotFound for the first id that does not exist."""
        self._check_kind(kind)
        ids = dedupe_preserving_order(target_ids)
        existing = {item.id for item in TARGET_REPOSITORIES[kind].get_by_ids(ids)}
        for target_id in ids:
            if target_id not in existing:
                raise NotFoundException(RESOURCE_NAMES[kind], target_id)
        return ids

    def resolve_all(self, associations: Dict[str, Iterable[int]]) -> Dict[str, List[int]]:
        return {kind: self.resolve(kind, ids) for kind, ids in associations.items()}

    def set_associations(self, game_id: int, kind: str, target_ids: Iterable[int]) -> List[int]:
        ids = self.resolve(kind, target_ids)
        AssociationRepository.replace_for_game(game_id, kind, ids)
        logger.debug(f"Game {game_id}: {kind} links replaced with {ids}")
        return ids

    def apply_resolved(self, game_id: int, resolved: Dict[str, List[int]]) -> None:
        """Replace link sets whose ids were already checked by ``resolve_all``"""
        for kind, ids in resolved.items():
            self._check_kind(kind)
            AssociationRepository.replace_for_game(game_id, kind, ids)

    def find_associations_by_game(self, game_id: int, kind: str) -> List[int]:
        self._check_kind(kind)
        return AssociationRepository.find_associations_by_game(game_id, kind)

    def find_associations_by_target(self, kind: str, target_id: int) -> List[int]:
        self._check_kind(kind)
        return AssociationRepository.find_associations_by_target(kind, target_id)

    def names_for_game(self, game_id: int, kind: str) -> List[str]:
        """Names of the linked entities, in link order"""
        ids = self.find_associations_by_game(game_id, kind)
        names = TARGET_REPOSITORIES[kind].get_names_by_ids(ids)
        return [names[target_id] for target_id in ids if target_id in names]

    def cascade_delete_game(self, game_id: int) -> Dict[str, int]:
        """Remove every link and every interaction referencing the game"""
        removed = {kind: AssociationRepository.delete_for_game(game_id, kind) for kind in ASSOCIATION_KINDS}
        removed["interactions"] = InteractionRepository.delete_for_game(game_id)
        return removed

    def cascade_delete_target(self, kind: str, target_id: int) -> int:
        """Remove every link pointing at a platform/developer/genre"""
        self._check_kind(kind)
        return AssociationRepository.delete_for_target(kind, target_id)
