"""
Pytest fixtures and configuration for catalog tests
"""
import os
import sys
from datetime import date
from types import SimpleNamespace

import pytest
from unittest.mock import MagicMock

# Add app directory to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'app'))

TODAY = date(2026, 10, 19)


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests"""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app_settings():
    """Test configuration: in-memory database, default cache sizing"""
    return {
        'database': {'url': 'sqlite://'},
        'cache': {'ttl_seconds': 300, 'max_entries': 500},
    }


@pytest.fixture
def app(app_settings, clock):
    from app import create_app
    from db import db

    application = create_app(app_settings, cache_clock=clock, today=lambda: TODAY)
    application.config['TESTING'] = True
    with application.app_context():
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    from flask import g

    # Requests share the fixture's app context, and with it the user Flask-Login caches on g
    @app.before_request
    def reset_login_user():
        g.pop('_login_user', None)

    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def catalog(app):
    return app.extensions['catalog_service']


@pytest.fixture
def references(app):
    return app.extensions['reference_service']


@pytest.fixture
def view_cache(app):
    return app.extensions['view_cache']


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing"""
    logger = MagicMock()
    logger.info = MagicMock()
    logger.error = MagicMock()
    logger.warning = MagicMock()
    logger.debug = MagicMock()
    return logger


@pytest.fixture
def make_user(app):
    from db import unit_of_work
    from repositories.user_repository import UserRepository

    counter = {'n': 0}

    def _make_user(name=None, admin=False):
        counter['n'] += 1
        name = name or f"user{counter['n']}"
        with unit_of_work():
            user = UserRepository.create(name=name, email=f"{name}@example.com", admin_access=admin)
            user_id = user.id
        return user_id

    return _make_user


@pytest.fixture
def seeded(app, make_user):
    """Users plus three platforms, two developers and two genres"""
    from db import unit_of_work
    from repositories.developer_repository import DeveloperRepository
    from repositories.genre_repository import GenreRepository
    from repositories.platform_repository import PlatformRepository

    with unit_of_work():
        platforms = [
            PlatformRepository.create(name='Switch', release_year=2017, manufacturer='Nintendo').id,
            PlatformRepository.create(name='PlayStation 5', release_year=2020, manufacturer='Sony').id,
            PlatformRepository.create(name='PC', release_year=1981, manufacturer='Various').id,
        ]
        developers = [
            DeveloperRepository.create(name='Nintendo EPD', founded_on=date(2015, 9, 16), country='Japan').id,
            DeveloperRepository.create(name='FromSoftware', founded_on=date(1986, 11, 1), country='Japan').id,
        ]
        genres = [
            GenreRepository.create(name='Adventure', description='Exploration driven').id,
            GenreRepository.create(name='RPG', description='Role-playing').id,
        ]

    return SimpleNamespace(
        alice=make_user('alice'),
        bob=make_user('bob'),
        carol=make_user('carol'),
        dave=make_user('dave'),
        admin=make_user('admin', admin=True),
        platforms=platforms,
        developers=developers,
        genres=genres,
    )


@pytest.fixture
def game_spec(seeded):
    """Factory for GameSpec values wired to the seeded reference data"""
    from schemas import GameSpec

    def _game_spec(name='Zelda', release_date=date(2023, 5, 12), platform_ids=None, developer_ids=None,
                   genre_ids=None, description='An adventure', cover_image=None):
        return GameSpec(
            name=name,
            description=description,
            cover_image=cover_image or f"/covers/{name.lower().replace(' ', '-')}.jpg",
            release_date=release_date,
            platform_ids=list(platform_ids if platform_ids is not None else seeded.platforms[:1]),
            developer_ids=list(developer_ids if developer_ids is not None else seeded.developers[:1]),
            genre_ids=list(genre_ids if genre_ids is not None else seeded.genres[:1]),
        )

    return _game_spec


@pytest.fixture
def make_game(catalog, game_spec):
    def _make_game(name='Zelda', **kwargs):
        return catalog.create_game(game_spec(name=name, **kwargs))['id']

    return _make_game


@pytest.fixture
def rate(catalog):
    """Create an interaction: rate(user_id, game_id, score=None, played=False)"""
    from schemas import InteractionSpec

    def _rate(user_id, game_id, score=None, review=None, played=False):
        return catalog.create_interaction(
            user_id, InteractionSpec(game_id=game_id, score=score, review=review, played=played)
        )

    return _rate
