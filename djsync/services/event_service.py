from typing import List
from flask import current_app
from sqlalchemy.orm.exc import StaleDataError
from djsync.extensions import db
from djsync.exceptions import ConflictError, NotFoundError, UnauthorizedError
from djsync.models import Event, User
from djsync.repositories import EventRepository, UserRepository
from djsync.schemas import EventCreateSchema, EventUpdateSchema
from djsync.utils.dates import parse_datetime, today_bounds
from djsync.utils.qr import make_event_qr_data_url


class EventService:
    @staticmethod
    def _timezone() -> str:
        return current_app.config["APP_TIMEZONE"]

    @staticmethod
    def _require_dj(user: User, message: str = "Forbidden"):
        if not user or not user.is_dj:
            raise UnauthorizedError(message)

    @staticmethod
    def _get_owned_event(event_id: int, user: User) -> Event:
        EventService._require_dj(user)
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        if event.user_id != user.id:
            raise UnauthorizedError("Forbidden")
        return event

    @staticmethod
    def live_projection(event: Event) -> dict:
        data = event.to_dict()
        data["dj_qr_code"] = event.dj.qr_code_data_url if event.dj else None
        return data

    @staticmethod
    def get_events() -> List[Event]:
        return EventRepository.get_events()

    @staticmethod
    def get_event(event_id: int) -> Event:
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    @staticmethod
    def get_event_dj_name(event_id: int) -> str:
        event = EventRepository.get_event(event_id)
        if not event or not event.dj:
            raise NotFoundError("Event or DJ not found")
        return event.dj.name

    @staticmethod
    def get_events_by_owner(user_id: int) -> List[Event]:
        return EventRepository.get_events_by_owner(user_id)

    @staticmethod
    def get_events_for_dj(user: User) -> List[Event]:
        EventService._require_dj(user)
        return EventRepository.get_events_by_owner(user.id)

    @staticmethod
    def get_live_events(user: User) -> List[Event]:
        """Events dated today; DJs only see their own."""
        start, end = today_bounds(EventService._timezone())
        owner_id = user.id if user and user.is_dj else None
        return EventRepository.get_events_between(start, end, user_id=owner_id)

    @staticmethod
    def get_history_events(user: User) -> List[Event]:
        """The DJ's events dated before today, most recent first."""
        EventService._require_dj(user)
        start, _ = today_bounds(EventService._timezone())
        return EventRepository.get_events_before(start, user.id)

    @staticmethod
    def create_event(data: EventCreateSchema, user: User) -> Event:
        EventService._require_dj(user, "Forbidden. Only DJs can create events.")

        event = EventRepository.create_event(
            {
                "user_id": user.id,
                "dj_name": data.dj_name or user.name,
                "event_name": data.event_name,
                "event_location": data.event_location,
                "event_date": parse_datetime(data.event_date, EventService._timezone()),
            }
        )
        current_app.logger.info(f"DJ {user.id} created event {event.id} '{event.event_name}'")
        return event

    @staticmethod
    def update_event(event_id: int, data: EventUpdateSchema, user: User) -> Event:
        event = EventService._get_owned_event(event_id, user)

        # event_name and event_date are required columns; null means "leave unchanged"
        attrs = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in ("event_location", "dj_name")
        }
        if "event_date" in attrs:
            attrs["event_date"] = parse_datetime(attrs["event_date"], EventService._timezone())

        try:
            event = EventRepository.update_event(event, attrs)
        except StaleDataError:
            db.session.rollback()
            raise ConflictError()
        current_app.logger.info(f"DJ {user.id} updated event {event_id}: {sorted(attrs)}")
        return event

    @staticmethod
    def delete_event(event_id: int, user: User):
        event = EventService._get_owned_event(event_id, user)
        try:
            EventRepository.delete_event(event)
        except StaleDataError:
            db.session.rollback()
            raise ConflictError()
        current_app.logger.info(f"DJ {user.id} deleted event {event_id}")
        return {"message": "Event deleted"}

    @staticmethod
    def get_event_qr_code(event_id: int) -> str:
        event = EventService.get_event(event_id)
        return make_event_qr_data_url(current_app.config["CLIENT_URL"], event.id, event.user_id)
