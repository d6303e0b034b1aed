from flask import current_app
from sqlalchemy.exc import IntegrityError
from djsync.extensions import db
from djsync.exceptions import AlreadyRegisteredError, NotFoundError
from djsync.models import EventGuest
from djsync.repositories import EventRepository, EventGuestRepository, UserRepository
from djsync.services.genre_service import GenreService
from djsync.utils.dates import today_bounds


class RegistrationService:
    @staticmethod
    def assign(event_id: int, user_id: int) -> EventGuest:
        """Link a guest to an event exactly once."""
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        user = UserRepository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        existing = EventGuestRepository.find_by_event_and_user(event_id, user_id)
        if existing:
            current_app.logger.warning(f"User {user_id} already registered for event {event_id}")
            raise AlreadyRegisteredError()

        try:
            guest = EventGuestRepository.add_guest(event_id, user_id)
        except IntegrityError:
            # Lost a race with a concurrent assignment of the same pair
            db.session.rollback()
            current_app.logger.warning(
                f"Duplicate registration rejected by constraint: user {user_id}, event {event_id}"
            )
            raise AlreadyRegisteredError()

        current_app.logger.info(f"User {user_id} assigned to event {event_id}")
        return guest

    @staticmethod
    def join_live_event_by_dj(dj_id: int, user_id: int):
        """Register a guest for the DJ's event running today (QR scan flow)."""
        dj = UserRepository.find_dj_by_id(dj_id)
        if not dj:
            raise NotFoundError("DJ not found")

        start, end = today_bounds(current_app.config["APP_TIMEZONE"])
        live_events = EventRepository.get_events_between(start, end, user_id=dj.id)
        if not live_events:
            raise NotFoundError("No live event found for this DJ")
        event_id = live_events[0].id

        user = UserRepository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        event = EventRepository.get_event(event_id)
        if event.find_guest(user_id) is not None:
            current_app.logger.warning(f"User {user_id} already registered for event {event_id}")
            raise AlreadyRegisteredError("You are already registered for this event")

        # Registration and the cached genre land in a single commit
        GenreService.save_event_genre_change(
            event, user_id, user.genre_choice or "", user.media_link or None
        )
        current_app.logger.info(f"User {user_id} joined event {event_id} of DJ {dj.id}")

        return {"dj": dj, "event": EventRepository.get_event(event_id)}
