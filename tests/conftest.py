"""Pytest configuration and shared fixtures."""

import itertools
from datetime import datetime

import pytest
import pytz
from flask_jwt_extended import create_access_token

from djsync import create_app
from djsync.extensions import db
from djsync.models import ActivationSerial, Event, User
from djsync.models.enums import UserRole


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "RATELIMIT_ENABLED": False,
            "JWT_SECRET_KEY": "test-secret",
            "APP_TIMEZONE": "UTC",
            "CLIENT_URL": "https://djsync.partyhub.io",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make_user(name=None, role=UserRole.GUEST, gender=None, genre_choice="", email=None, phone_number=None):
        n = next(counter)
        user = User(
            name=name or f"Guest {n}",
            email=email or f"user{n}@partyhub.io",
            phone_number=phone_number,
            gender=gender,
            role=role,
            genre_choice=genre_choice,
            media_link="",
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_dj(make_user):
    def _make_dj(name="DJ Nova", **kwargs):
        return make_user(name=name, role=UserRole.DJ, **kwargs)

    return _make_dj


@pytest.fixture
def make_event(app):
    def _make_event(dj, event_date=None, event_name="Friday Night", event_location="Warehouse 9"):
        event = Event(
            user_id=dj.id,
            dj_name=dj.name,
            event_name=event_name,
            event_location=event_location,
            event_date=event_date or datetime.now(pytz.UTC),
        )
        db.session.add(event)
        db.session.commit()
        return event

    return _make_event


@pytest.fixture
def make_serial(app):
    def _make_serial(code="SERIAL-0001"):
        serial = ActivationSerial(serial=code, is_active=False)
        db.session.add(serial)
        db.session.commit()
        return serial

    return _make_serial


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        token = create_access_token(identity=str(user.id))
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
