from typing import List
from sqlalchemy import case, func, select
from sqlalchemy.orm import selectinload
from djsync.extensions import db
from djsync.models import Event, EventGuest, User
from djsync.models.enums import Gender


class EventGuestRepository:
    @staticmethod
    def find_by_event_and_user(event_id: int, user_id: int) -> EventGuest:
        """Find a guest registration by event_id and user_id"""
        return EventGuest.query.filter_by(event_id=event_id, user_id=user_id).first()

    @staticmethod
    def add_guest(event_id: int, user_id: int) -> EventGuest:
        guest = EventGuest(event_id=event_id, user_id=user_id, genre_choice="", media_link="")
        db.session.add(guest)
        db.session.commit()
        return guest

    @staticmethod
    def count_by_event(event_id: int) -> int:
        return EventGuest.query.filter_by(event_id=event_id).count()

    @staticmethod
    def find_by_dj(dj_id: int) -> List[EventGuest]:
        """All guest registrations across the events owned by a DJ."""
        return (
            db.session.query(EventGuest)
            .options(selectinload(EventGuest.user))
            .join(Event, EventGuest.event_id == Event.id)
            .filter(Event.user_id == dj_id)
            .order_by(EventGuest.id)
            .all()
        )

    @staticmethod
    def find_guest_users_by_dj(dj_id: int) -> List[User]:
        """Distinct users registered to any event owned by a DJ."""
        guest_ids = (
            select(EventGuest.user_id)
            .join(Event, EventGuest.event_id == Event.id)
            .where(Event.user_id == dj_id)
        )
        return User.query.filter(User.id.in_(guest_ids)).order_by(User.id).all()

    @staticmethod
    def genre_totals_by_dj(dj_id: int):
        """(genre, total, by_females, by_males) rows across a DJ's events."""
        return (
            db.session.query(
                EventGuest.genre_choice,
                func.count(EventGuest.id),
                func.sum(case((User.gender == Gender.FEMALE, 1), else_=0)),
                func.sum(case((User.gender == Gender.MALE, 1), else_=0)),
            )
            .join(Event, EventGuest.event_id == Event.id)
            .join(User, EventGuest.user_id == User.id)
            .filter(Event.user_id == dj_id, EventGuest.genre_choice != "")
            .group_by(EventGuest.genre_choice)
            .all()
        )
