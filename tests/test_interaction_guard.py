"""
Tests for the interaction write rules: score range, uniqueness and ownership
"""
import pytest

from exceptions import AuthorizationException, BusinessRuleException, DuplicateResourceException
from services.interaction_guard import CallerContext, InteractionGuard


@pytest.fixture
def guard():
    return InteractionGuard()


class TestScoreValidation:
    """Test the 1-10 score rule"""

    @pytest.mark.parametrize('score', [None, 1, 5, 10])
    def test_accepts(self, guard, score):
        guard.validate_score(score)

    @pytest.mark.parametrize('score', [0, 11, -3, 100])
    def test_rejects_out_of_range(self, guard, score):
        with pytest.raises(BusinessRuleException) as exc_info:
            guard.validate_score(score)
        assert exc_info.value.code == 'BUSINESS_RULE_VIOLATION'

    @pytest.mark.parametrize('score', [True, '7', 7.5])
    def test_rejects_non_integers(self, guard, score):
        with pytest.raises(BusinessRuleException):
            guard.validate_score(score)


class TestReviewValidation:
    """Test the review length limit"""

    def test_accepts_limit(self, guard):
        guard.validate_review('x' * 1000)
        guard.validate_review(None)

    def test_rejects_over_limit(self, guard):
        with pytest.raises(BusinessRuleException):
            guard.validate_review('x' * 1001)


class TestOwnership:
    """Test the owner-or-admin primitive"""

    def test_owner(self):
        assert InteractionGuard.is_owner_or_admin(3, 3, False)

    def test_other_user(self):
        assert not InteractionGuard.is_owner_or_admin(3, 4, False)

    def test_admin(self):
        assert InteractionGuard.is_owner_or_admin(3, 4, True)

    def test_anonymous(self):
        assert not InteractionGuard.is_owner_or_admin(3, None, False)

    def test_ensure_can_modify(self, guard):
        guard.ensure_can_modify(3, CallerContext(3))
        guard.ensure_can_modify(3, CallerContext(9, is_admin=True))
        with pytest.raises(AuthorizationException) as exc_info:
            guard.ensure_can_modify(3, CallerContext(4), action='delete')
        assert exc_info.value.status_code == 403
        with pytest.raises(AuthorizationException):
            guard.ensure_can_modify(3, None)


class TestCheckCreate:
    """Test the ordering of create checks"""

    def test_duplicate_detected(self, guard, seeded, make_game, rate):
        game_id = make_game('Zelda')
        rate(seeded.alice, game_id, 8)

        with pytest.raises(DuplicateResourceException) as exc_info:
            guard.check_create(seeded.alice, game_id, 9, None)
        assert exc_info.value.status_code == 409

    def test_duplicate_reported_before_score(self, guard, seeded, make_game, rate):
        game_id = make_game('Zelda')
        rate(seeded.alice, game_id, 8)

        with pytest.raises(DuplicateResourceException):
            guard.check_create(seeded.alice, game_id, 11, None)

    def test_other_user_may_interact(self, guard, seeded, make_game, rate):
        game_id = make_game('Zelda')
        rate(seeded.alice, game_id, 8)
        guard.check_create(seeded.bob, game_id, 9, 'Great')
