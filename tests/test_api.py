import pytest

from ecobuddy.extensions import db
from ecobuddy.models import Facility, FacilityStatus

from tests.helpers import get_token


def search(client, token, **params):
    headers = {'X-CSRF-Token': token} if token is not None else {}
    return client.get('/api/search', query_string=params, headers=headers)


# -----------------------------------------------------------------------------
# Search endpoint
# -----------------------------------------------------------------------------

def test_search_by_keyword(client, seeded):
    token = get_token(client)
    r = search(client, token, q='bin')
    assert r.status_code == 200
    assert [f['id'] for f in r.get_json()] == [1]


def test_search_by_town_with_empty_keyword(client, seeded):
    token = get_token(client)
    r = search(client, token, q='', town='Manchester')
    assert [f['id'] for f in r.get_json()] == [2]


def test_search_empty_keyword_returns_all(client, seeded):
    token = get_token(client)
    r = search(client, token, q='', category='', town='')
    assert [f['id'] for f in r.get_json()] == [1, 2]


def test_search_results_carry_map_fields(client, seeded):
    token = get_token(client)
    item = search(client, token, q='solar').get_json()[0]
    for key in ('id', 'title', 'category', 'category_name', 'description', 'houseNumber',
                'streetName', 'town', 'county', 'lat', 'lng', 'comments'):
        assert key in item
    assert item['category_name'] == 'Charging point'
    assert item['lat'] == pytest.approx(53.4668)


def test_search_returns_at_most_ten(client, many_facilities):
    token = get_token(client)
    r = search(client, token, q='facility', limit='50')
    assert len(r.get_json()) == 10


@pytest.mark.parametrize('token', [None, '', 'not-a-token'])
def test_search_rejects_bad_token(client, seeded, token):
    get_token(client)
    r = search(client, token, q='bin')
    assert r.status_code == 403
    body = r.get_json()
    assert body['success'] is False
    assert 'error' in body
    assert 'Central Bin' not in r.get_data(as_text=True)


def test_search_rejects_token_from_another_session(app, seeded):
    first = app.test_client()
    second = app.test_client()
    token = get_token(first)
    get_token(second)

    r = search(second, token, q='')
    assert r.status_code == 403


def test_search_rejects_token_without_session(app, seeded):
    token = get_token(app.test_client())
    r = search(app.test_client(), token, q='')
    assert r.status_code == 403


def test_search_rejects_non_numeric_category(client, seeded):
    token = get_token(client)
    r = search(client, token, q='bin', category='abc')
    assert r.status_code == 400
    assert r.get_json()['success'] is False

    r = search(client, token, q='bin', category='9' * 20)
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Unknown category.'


# -----------------------------------------------------------------------------
# Comment update endpoint
# -----------------------------------------------------------------------------

def post_comment(client, token, **fields):
    data = dict(fields)
    if token is not None:
        data['csrf_token'] = token
    return client.post('/api/comments', data=data)


def test_comment_update_succeeds_and_persists(client, seeded):
    token = get_token(client)
    r = post_comment(client, token, facility_id='1', comments='Bin is full')
    assert r.status_code == 200
    assert r.get_json() == {
        'success': True,
        'message': 'Comment updated successfully.',
        'data': {'facility_id': 1, 'comment': 'Bin is full'},
    }

    r = client.get('/api/facilities/1')
    assert r.get_json()['comments'] == 'Bin is full'


def test_comment_update_trims_whitespace(client, seeded):
    token = get_token(client)
    r = post_comment(client, token, facility_id='2', comments='  Not working ')
    assert r.status_code == 200
    assert r.get_json()['data']['comment'] == 'Not working'


@pytest.mark.parametrize('comment', ['Bin is empty', '', 'bin is full', '<script>alert(1)</script>'])
def test_comment_outside_allowed_set_is_rejected(client, seeded, comment):
    token = get_token(client)
    post_comment(client, token, facility_id='1', comments='Often busy')

    r = post_comment(client, token, facility_id='1', comments=comment)
    assert r.status_code == 400
    assert r.get_json()['success'] is False
    assert client.get('/api/facilities/1').get_json()['comments'] == 'Often busy'


def test_comment_for_unknown_facility_is_not_found(client, seeded):
    token = get_token(client)
    r = post_comment(client, token, facility_id='999', comments='Bin is full')
    assert r.status_code == 404
    body = r.get_json()
    assert body['success'] is False
    assert 'not found' in body['error']


def test_comment_for_out_of_range_id_is_not_found(client, seeded):
    token = get_token(client)
    r = post_comment(client, token, facility_id='9' * 20, comments='Bin is full')
    assert r.status_code == 404
    assert r.get_json()['success'] is False


@pytest.mark.parametrize('fields', [
    {'comments': 'Bin is full'},
    {'facility_id': '1'},
    {'facility_id': 'one', 'comments': 'Bin is full'},
])
def test_comment_missing_or_malformed_fields(client, seeded, fields):
    token = get_token(client)
    r = post_comment(client, token, **fields)
    assert r.status_code == 400


def test_comment_requires_token(app, client, seeded):
    get_token(client)
    r = post_comment(client, 'forged', facility_id='1', comments='Bin is full')
    assert r.status_code == 403
    r = post_comment(client, None, facility_id='1', comments='Bin is full')
    assert r.status_code == 403

    with app.app_context():
        assert db.session.get(Facility, 1).comments is None


def test_comment_token_in_header_is_not_enough(client, seeded):
    token = get_token(client)
    r = client.post('/api/comments', data={'facility_id': '1', 'comments': 'Bin is full'},
                    headers={'X-CSRF-Token': token})
    assert r.status_code == 403


@pytest.mark.parametrize('method', ['GET', 'PUT', 'DELETE', 'PATCH', 'OPTIONS'])
def test_comment_endpoint_rejects_other_verbs(client, seeded, method):
    r = client.open('/api/comments', method=method)
    assert r.status_code == 405
    assert r.get_json() == {'success': False, 'error': 'Invalid request method.'}


# -----------------------------------------------------------------------------
# Lookups
# -----------------------------------------------------------------------------

def test_facility_detail_not_found(client, seeded):
    r = client.get('/api/facilities/42')
    assert r.status_code == 404
    assert r.get_json()['success'] is False

    r = client.get('/api/facilities/' + '9' * 20)
    assert r.status_code == 404


def test_categories_only_lists_used_ones(app, client, seeded):
    from ecobuddy.models import Category
    with app.app_context():
        db.session.add(Category(id=3, name='Bike share'))
        db.session.commit()

    r = client.get('/api/categories')
    assert r.get_json() == [{'id': 2, 'name': 'Charging point'}, {'id': 1, 'name': 'Recycling'}]


def test_towns_are_distinct_and_sorted(client, many_facilities):
    assert client.get('/api/towns').get_json() == ['Bolton', 'Manchester', 'Salford']


def test_statuses_come_from_the_enum(client):
    assert client.get('/api/statuses').get_json() == [s.value for s in FacilityStatus]


def test_unknown_api_route_is_json(client):
    r = client.get('/api/nope')
    assert r.status_code == 404
    assert r.get_json()['success'] is False


def test_store_failure_is_reported_not_retried(client, seeded, monkeypatch):
    from sqlalchemy.exc import OperationalError
    calls = []

    def broken(self, *args, **kwargs):
        calls.append(1)
        raise OperationalError('SELECT', {}, Exception('database is locked'))

    token = get_token(client)
    monkeypatch.setattr('sqlalchemy.orm.Query.all', broken)
    r = search(client, token, q='bin')
    assert r.status_code == 503
    assert r.get_json()['success'] is False
    assert len(calls) == 1

    monkeypatch.setattr('sqlalchemy.orm.Query.update', broken)
    r = post_comment(client, token, facility_id='1', comments='Bin is full')
    assert r.status_code == 503
