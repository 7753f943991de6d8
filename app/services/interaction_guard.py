"""Rules checked before an interaction write reaches the database."""
from dataclasses import dataclass
from typing import Optional

from constants import REVIEW_MAX_LENGTH, SCORE_MAX, SCORE_MIN
from exceptions import AuthorizationException, BusinessRuleException, DuplicateResourceException
from repositories.interaction_repository import InteractionRepository


@dataclass(frozen=True)
class CallerContext:
    """Identity of the request's caller, as resolved by the authentication layer"""
    user_id: int
    is_admin: bool = False


class InteractionGuard:
    """
    Rules
    -----
    * One interaction per (user, game). The pre-check here is not atomic
      with the insert; the unique constraint on the table is the backstop.
    * ``score`` is ``None`` or an integer in **1-10** (inclusive).
    * ``review`` is ``None`` or at most 1000 characters.
    * Only the owner or an administrator may update or delete.
    """

    @staticmethod
    def validate_score(score) -> None:
        if score is None:
            return
        if isinstance(score, bool) or not isinstance(score, int):
            raise BusinessRuleException("Score must be an integer")
        if not SCORE_MIN <= score <= SCORE_MAX:
            raise BusinessRuleException(f"Score must be between {SCORE_MIN} and {SCORE_MAX}")

    @staticmethod
    def validate_review(review) -> None:
        if review is not None and len(review) > REVIEW_MAX_LENGTH:
            raise BusinessRuleException(f"Review cannot exceed {REVIEW_MAX_LENGTH} characters")

    @staticmethod
    def ensure_not_duplicate(user_id, game_id) -> None:
        if InteractionRepository.exists_for(user_id, game_id):
            raise DuplicateResourceException(duplicate_message(user_id, game_id))

    @staticmethod
    def is_owner_or_admin(owner_id, caller_id, caller_is_admin: bool) -> bool:
        """Comparison primitive for the authorization layer"""
        if caller_is_admin:
            return True
        return caller_id is not None and owner_id == caller_id

    def ensure_can_modify(self, owner_id, caller: Optional[CallerContext], action: str = "modify") -> None:
        if caller is None or not self.is_owner_or_admin(owner_id, caller.user_id, caller.is_admin):
            raise AuthorizationException(f"You cannot {action} another user's interaction")

    def check_create(self, user_id, game_id, score, review) -> None:
        self.ensure_not_duplicate(user_id, game_id)
        self.validate_score(score)
        self.validate_review(review)

    def check_update(self, owner_id, caller, score, review) -> None:
        self.ensure_can_modify(owner_id, caller, action="modify")
        self.validate_score(score)
        self.validate_review(review)


def duplicate_message(user_id, game_id) -> str:
    return (
        f"User {user_id} already has an interaction for game {game_id}; "
        "update the existing one instead"
    )
