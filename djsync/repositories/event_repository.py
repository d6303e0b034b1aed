from datetime import datetime
from typing import List
from sqlalchemy.orm import selectinload
from djsync.extensions import db
from djsync.models import Event, EventGuest


def _with_children(query):
    return query.options(
        selectinload(Event.dj),
        selectinload(Event.guests).selectinload(EventGuest.user),
        selectinload(Event.genre_stats),
    )


class EventRepository:
    @staticmethod
    def get_events() -> List[Event]:
        return _with_children(Event.query).order_by(Event.event_date.asc()).all()

    @staticmethod
    def get_event(event_id: int) -> Event:
        return Event.query.filter_by(id=event_id).first()

    @staticmethod
    def get_events_by_owner(user_id: int) -> List[Event]:
        return (
            _with_children(Event.query)
            .filter(Event.user_id == user_id)
            .order_by(Event.event_date.asc())
            .all()
        )

    @staticmethod
    def get_events_between(start: datetime, end: datetime, user_id: int | None = None) -> List[Event]:
        query = _with_children(Event.query).filter(
            Event.event_date >= start, Event.event_date <= end
        )
        if user_id is not None:
            query = query.filter(Event.user_id == user_id)
        return query.order_by(Event.event_date.asc()).all()

    @staticmethod
    def get_events_before(before: datetime, user_id: int) -> List[Event]:
        return (
            _with_children(Event.query)
            .filter(Event.user_id == user_id, Event.event_date < before)
            .order_by(Event.event_date.desc())
            .all()
        )

    @staticmethod
    def get_events_for_guest(user_id: int, since: datetime | None = None) -> List[Event]:
        query = Event.query.join(EventGuest, EventGuest.event_id == Event.id).filter(
            EventGuest.user_id == user_id
        )
        if since is not None:
            query = query.filter(Event.event_date >= since)
        return query.order_by(Event.event_date.asc()).all()

    @staticmethod
    def create_event(attrs) -> Event:
        event = Event(**attrs)
        db.session.add(event)
        db.session.commit()
        return event

    @staticmethod
    def update_event(event: Event, attrs: dict) -> Event:
        for key, value in attrs.items():
            if hasattr(event, key):
                setattr(event, key, value)
        db.session.commit()
        return event

    @staticmethod
    def delete_event(event: Event):
        db.session.delete(event)
        db.session.commit()
