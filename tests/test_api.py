"""
HTTP tests: response envelopes, status mapping and access control
"""
from unittest.mock import patch

import pytest


def auth(user_id):
    return {'X-User-Id': str(user_id)}


@pytest.fixture
def game_payload(seeded):
    return {
        'name': 'Zelda',
        'description': 'An adventure',
        'cover_image': '/covers/zelda.jpg',
        'release_date': '2023-05-12',
        'platform_ids': seeded.platforms[:1],
        'developer_ids': seeded.developers[:1],
        'genre_ids': seeded.genres[:1],
    }


class TestGameEndpoints:
    """Test /api/games"""

    def test_list_envelope(self, client, make_game):
        make_game('Zelda')
        response = client.get('/api/games')

        assert response.status_code == 200
        body = response.get_json()
        assert body['success'] is True
        assert body['code'] == 'SUCCESS'
        assert body['data'][0]['name'] == 'Zelda'

    def test_create_requires_authentication(self, client, game_payload):
        response = client.post('/api/games', json=game_payload)
        assert response.status_code == 401
        assert response.get_json()['code'] == 'UNAUTHORIZED'

    def test_create_requires_admin(self, client, seeded, game_payload):
        response = client.post('/api/games', json=game_payload, headers=auth(seeded.alice))
        assert response.status_code == 403
        assert response.get_json()['code'] == 'FORBIDDEN'

    def test_unknown_user_header_is_anonymous(self, client, seeded, game_payload):
        response = client.post('/api/games', json=game_payload, headers=auth(987654))
        assert response.status_code == 401

    def test_admin_creates_game(self, client, seeded, game_payload):
        response = client.post('/api/games', json=game_payload, headers=auth(seeded.admin))

        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['platforms'] == ['Switch']
        assert data['review_count'] == 0

    def test_missing_field_is_validation_error(self, client, seeded, game_payload):
        del game_payload['release_date']
        response = client.post('/api/games', json=game_payload, headers=auth(seeded.admin))

        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'

    def test_unknown_platform_is_not_found(self, client, seeded, game_payload):
        game_payload['platform_ids'] = [5000]
        response = client.post('/api/games', json=game_payload, headers=auth(seeded.admin))

        assert response.status_code == 404
        assert response.get_json()['code'] == 'NOT_FOUND'

    def test_empty_association_is_business_rule(self, client, seeded, game_payload):
        game_payload['genre_ids'] = []
        response = client.post('/api/games', json=game_payload, headers=auth(seeded.admin))

        assert response.status_code == 400
        assert response.get_json()['code'] == 'BUSINESS_RULE_VIOLATION'

    def test_detail_not_found(self, client):
        response = client.get('/api/games/4040')
        assert response.status_code == 404
        assert response.get_json()['success'] is False

    def test_delete_then_detail(self, client, seeded, make_game):
        game_id = make_game('Zelda')
        assert client.delete(f'/api/games/{game_id}', headers=auth(seeded.admin)).status_code == 200
        assert client.get(f'/api/games/{game_id}').status_code == 404

    def test_top_rated_limit(self, client, make_game):
        for name in ('A', 'B', 'C'):
            make_game(name)

        assert len(client.get('/api/games/top-rated?limit=2').get_json()['data']) == 2
        assert client.get('/api/games/top-rated?limit=500').status_code == 400
        assert client.get('/api/games/top-rated?limit=abc').status_code == 400

    def test_search(self, client, make_game):
        make_game('Elden Ring')
        response = client.get('/api/games/search?q=ring')
        assert [g['name'] for g in response.get_json()['data']] == ['Elden Ring']
        assert client.get('/api/games/search').status_code == 400


class TestInteractionEndpoints:
    """Test /api/interactions"""

    def test_create_and_conflict(self, client, seeded, make_game):
        game_id = make_game('Zelda')
        payload = {'game_id': game_id, 'score': 8, 'review': 'Great', 'played': True}

        first = client.post('/api/interactions', json=payload, headers=auth(seeded.alice))
        assert first.status_code == 201
        assert first.get_json()['data']['user_id'] == seeded.alice

        second = client.post('/api/interactions', json=payload, headers=auth(seeded.alice))
        assert second.status_code == 409
        assert second.get_json()['code'] == 'CONFLICT'

    def test_score_out_of_range(self, client, seeded, make_game):
        game_id = make_game('Zelda')
        response = client.post('/api/interactions', json={'game_id': game_id, 'score': 11}, headers=auth(seeded.alice))

        assert response.status_code == 400
        assert response.get_json()['code'] == 'BUSINESS_RULE_VIOLATION'

    def test_fractional_score_rejected(self, client, seeded, make_game):
        game_id = make_game('Zelda')
        response = client.post('/api/interactions', json={'game_id': game_id, 'score': 10.9}, headers=auth(seeded.alice))

        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'
        assert client.get(f'/api/users/{seeded.alice}/games/{game_id}/interaction').status_code == 404

    def test_fractional_game_id_rejected(self, client, seeded, make_game):
        game_id = make_game('Zelda')
        response = client.post('/api/interactions', json={'game_id': game_id + 0.9, 'score': 5}, headers=auth(seeded.alice))
        assert response.status_code == 400

    def test_whole_number_score_accepted(self, client, seeded, make_game):
        game_id = make_game('Zelda')
        response = client.post('/api/interactions', json={'game_id': game_id, 'score': 7.0}, headers=auth(seeded.alice))

        assert response.status_code == 201
        assert response.get_json()['data']['score'] == 7

    def test_anonymous_cannot_rate(self, client, make_game):
        game_id = make_game('Zelda')
        assert client.post('/api/interactions', json={'game_id': game_id, 'score': 5}).status_code == 401

    def test_non_owner_update_is_forbidden(self, client, seeded, make_game, rate):
        game_id = make_game('Zelda')
        created = rate(seeded.alice, game_id, 6)

        response = client.put(f"/api/interactions/{created['id']}", json={'score': 2}, headers=auth(seeded.bob))
        assert response.status_code == 403

        response = client.put(f"/api/interactions/{created['id']}", json={'score': 7}, headers=auth(seeded.alice))
        assert response.status_code == 200
        assert response.get_json()['data']['score'] == 7

    def test_rating_endpoint_is_live(self, client, seeded, make_game, rate):
        game_id = make_game('Zelda')
        client.get(f'/api/games/{game_id}')
        rate(seeded.alice, game_id, 10)

        assert client.get(f'/api/games/{game_id}').get_json()['data']['review_count'] == 0
        assert client.get(f'/api/games/{game_id}/rating').get_json()['data'] == {
            'average_score': 10.0,
            'review_count': 1,
        }

    def test_user_listings(self, client, seeded, make_game, rate):
        game_id = make_game('Zelda')
        rate(seeded.alice, game_id, None, played=True)

        assert len(client.get(f'/api/users/{seeded.alice}/played').get_json()['data']) == 1
        assert client.get(f'/api/users/{seeded.bob}/games/{game_id}/interaction').status_code == 404


class TestCatalogEndpoints:
    """Test /api/platforms, /api/developers and /api/genres"""

    def test_list_platforms(self, client, seeded):
        response = client.get('/api/platforms')
        assert [p['name'] for p in response.get_json()['data']] == ['PC', 'PlayStation 5', 'Switch']

    def test_create_duplicate_genre(self, client, seeded):
        response = client.post('/api/genres', json={'name': 'RPG'}, headers=auth(seeded.admin))
        assert response.status_code == 409

    def test_create_developer(self, client, seeded):
        response = client.post(
            '/api/developers',
            json={'name': 'Team Cherry', 'founded_on': '2014-01-01', 'country': 'Australia'},
            headers=auth(seeded.admin),
        )
        assert response.status_code == 201
        assert response.get_json()['data']['founded_on'] == '2014-01-01'

    def test_unknown_collection(self, client):
        assert client.get('/api/publishers').status_code == 404


class TestSystemEndpoints:
    """Test health and cache statistics"""

    def test_health(self, client):
        assert client.get('/api/system/health').get_json()['status'] == 'healthy'

    def test_cache_stats(self, client, make_game):
        make_game('Zelda')
        client.get('/api/games')
        client.get('/api/games')

        stats = client.get('/api/system/cache').get_json()['data']
        assert stats['regions']['listing'] == 1
        assert stats['hits'] >= 1


class TestReferenceQueryEndpoints:
    """Test platform and developer filters and orderings"""

    def test_platforms_by_manufacturer(self, client, seeded):
        response = client.get('/api/platforms/manufacturer/nintendo')
        assert [p['name'] for p in response.get_json()['data']] == ['Switch']

    def test_platforms_newest(self, client, seeded):
        response = client.get('/api/platforms/newest')
        assert [p['release_year'] for p in response.get_json()['data']] == [2020, 2017, 1981]

    def test_developers_by_country(self, client, seeded):
        response = client.get('/api/developers/country/Japan')
        assert [d['name'] for d in response.get_json()['data']] == ['FromSoftware', 'Nintendo EPD']

    def test_developers_oldest(self, client, seeded):
        response = client.get('/api/developers/oldest')
        assert [d['name'] for d in response.get_json()['data']] == ['FromSoftware', 'Nintendo EPD']

    def test_item_routes_still_resolve(self, client, seeded):
        response = client.get(f'/api/platforms/{seeded.platforms[0]}')
        assert response.get_json()['data']['name'] == 'Switch'


class TestNameRace:
    """Test that a lost unique-name race is reported as a conflict"""

    def test_concurrent_genre_name(self, client, seeded):
        from services.reference_service import ReferenceDataService

        with patch.object(ReferenceDataService, '_ensure_name_free'):
            response = client.post('/api/genres', json={'name': 'RPG'}, headers=auth(seeded.admin))

        assert response.status_code == 409
        assert response.get_json()['code'] == 'CONFLICT'


class TestAccessRequired:
    """Test the access decorator raises the authentication exceptions"""

    @pytest.fixture
    def guarded(self):
        from middleware.auth import access_required

        @access_required('admin')
        def view():
            return 'ok'

        return view

    def test_anonymous(self, app, guarded):
        from exceptions import AuthenticationException

        with app.test_request_context('/'):
            with pytest.raises(AuthenticationException):
                guarded()

    def test_non_admin(self, app, seeded, guarded):
        from exceptions import AuthorizationException

        with app.test_request_context('/', headers=auth(seeded.alice)):
            with pytest.raises(AuthorizationException) as exc_info:
                guarded()
        assert exc_info.value.status_code == 403

    def test_admin(self, app, seeded, guarded):
        with app.test_request_context('/', headers=auth(seeded.admin)):
            assert guarded() == 'ok'

    def test_rendered_envelope(self, client, seeded):
        response = client.delete('/api/games/1', headers=auth(seeded.bob))
        body = response.get_json()
        assert response.status_code == 403
        assert body == {'code': 'FORBIDDEN', 'success': False, 'message': 'Admin access required'}
