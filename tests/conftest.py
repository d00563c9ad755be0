import pytest

from ecobuddy import create_app
from ecobuddy.config import TestConfig
from ecobuddy.extensions import db
from ecobuddy.models import Category, Facility, User

from tests.helpers import FakeTimer


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def seeded(app):
    """The two facilities used throughout: a bin in Salford and a charger in Manchester."""
    with app.app_context():
        db.session.add_all([
            Category(id=1, name='Recycling'),
            Category(id=2, name='Charging point'),
        ])
        db.session.add_all([
            Facility(id=1, title='Central Bin', category=1, description='General waste and recycling',
                     house_number='12', street_name='Crescent', town='Salford', county='Greater Manchester',
                     lat=53.4846, lng=-2.2708, contributor='admin'),
            Facility(id=2, title='Solar Charger', category=2, description='Solar powered phone charging',
                     house_number='1', street_name='Oxford Road', town='Manchester', county='Greater Manchester',
                     lat=53.4668, lng=-2.2339, contributor='admin'),
        ])
        db.session.commit()
    return app


@pytest.fixture()
def many_facilities(app):
    """Twenty-five facilities over three categories and three towns; a few without coordinates."""
    towns = ['Salford', 'Manchester', 'Bolton']
    with app.app_context():
        db.session.add_all([
            Category(id=1, name='Recycling bin'),
            Category(id=2, name='E-scooter'),
            Category(id=3, name='Charging point'),
        ])
        for i in range(1, 26):
            db.session.add(Facility(
                id=i,
                title=f'Facility {i:02d}',
                category=i % 3 + 1,
                description='Bin for glass' if i % 4 == 0 else 'Community point',
                town=towns[i % 3],
                lat=None if i % 5 == 0 else 53.4 + i / 1000,
                lng=None if i % 5 == 0 else -2.2 - i / 1000,
            ))
        db.session.commit()
    return app


def _make_user(app, username, password, is_admin):
    with app.app_context():
        user = User(username=username, is_admin=is_admin)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()


@pytest.fixture()
def admin_client(app, client):
    _make_user(app, 'admin', 'adminpass', True)
    client.post('/login', data={'username': 'admin', 'password': 'adminpass'})
    return client


@pytest.fixture()
def user_client(app, client):
    _make_user(app, 'visitor', 'visitorpass', False)
    client.post('/login', data={'username': 'visitor', 'password': 'visitorpass'})
    return client


@pytest.fixture()
def timers():
    created = []

    def factory(delay, fn):
        timer = FakeTimer(delay, fn)
        created.append(timer)
        return timer

    factory.created = created
    return factory
