"""
Tests for association set maintenance and cascading deletes
"""
import pytest

from db import unit_of_work
from exceptions import BusinessRuleException, NotFoundException
from repositories.association_repository import AssociationRepository
from services.association_manager import AssociationManager


@pytest.fixture
def manager():
    return AssociationManager()


class TestSetAssociations:
    """Test full-replace semantics of association sets"""

    def test_replace_is_not_a_merge(self, seeded, make_game, manager):
        game_id = make_game('Zelda', platform_ids=seeded.platforms)
        assert manager.find_associations_by_game(game_id, 'platform') == seeded.platforms

        with unit_of_work():
            manager.set_associations(game_id, 'platform', seeded.platforms[1:])

        assert manager.find_associations_by_game(game_id, 'platform') == seeded.platforms[1:]

    def test_duplicate_ids_collapse(self, seeded, make_game, manager):
        game_id = make_game('Zelda')
        first, second = seeded.genres

        with unit_of_work():
            stored = manager.set_associations(game_id, 'genre', [second, first, second, first])

        assert stored == [second, first]
        assert manager.find_associations_by_game(game_id, 'genre') == [second, first]

    def test_unknown_target_leaves_previous_set(self, seeded, make_game, manager):
        game_id = make_game('Zelda', platform_ids=seeded.platforms[:2])

        with pytest.raises(NotFoundException) as exc_info:
            with unit_of_work():
                manager.set_associations(game_id, 'platform', [seeded.platforms[2], 9999])

        assert exc_info.value.status_code == 404
        assert '9999' in exc_info.value.message
        assert manager.find_associations_by_game(game_id, 'platform') == seeded.platforms[:2]

    def test_unknown_kind(self, make_game, manager):
        game_id = make_game('Zelda')
        with pytest.raises(BusinessRuleException):
            manager.set_associations(game_id, 'publisher', [1])

    def test_other_kinds_untouched(self, seeded, make_game, manager):
        game_id = make_game('Zelda', developer_ids=seeded.developers)

        with unit_of_work():
            manager.set_associations(game_id, 'platform', seeded.platforms)

        assert manager.find_associations_by_game(game_id, 'developer') == seeded.developers


class TestLookups:
    """Test explicit relation lookups"""

    def test_find_by_target(self, seeded, make_game, manager):
        switch = seeded.platforms[0]
        first = make_game('Zelda', platform_ids=[switch])
        second = make_game('Metroid', platform_ids=[switch, seeded.platforms[1]])
        make_game('Bloodborne', platform_ids=[seeded.platforms[1]])

        assert sorted(manager.find_associations_by_target('platform', switch)) == sorted([first, second])

    def test_names_follow_link_order(self, seeded, make_game, manager):
        game_id = make_game('Zelda', platform_ids=[seeded.platforms[2], seeded.platforms[0]])
        assert manager.names_for_game(game_id, 'platform') == ['PC', 'Switch']


class TestCascades:
    """Test removal of links and interactions"""

    def test_cascade_delete_game(self, seeded, make_game, rate, manager):
        game_id = make_game('Zelda', platform_ids=seeded.platforms, genre_ids=seeded.genres)
        rate(seeded.alice, game_id, 7)
        rate(seeded.bob, game_id, None)

        with unit_of_work():
            removed = manager.cascade_delete_game(game_id)

        assert removed == {'platform': 3, 'developer': 1, 'genre': 2, 'interactions': 2}
        for kind in ('platform', 'developer', 'genre'):
            assert AssociationRepository.find_associations_by_game(game_id, kind) == []

    def test_cascade_delete_target(self, seeded, make_game, manager):
        switch, ps5, _ = seeded.platforms
        game_id = make_game('Zelda', platform_ids=[switch, ps5])

        with unit_of_work():
            assert manager.cascade_delete_target('platform', switch) == 1

        assert manager.find_associations_by_game(game_id, 'platform') == [ps5]
