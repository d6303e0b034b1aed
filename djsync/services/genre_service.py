from datetime import datetime
from typing import Optional, Tuple
import pytz
from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from djsync.extensions import db
from djsync.exceptions import ConflictError, NotFoundError
from djsync.models import Event, EventGenreStat, EventGuest, User
from djsync.repositories import EventRepository, UserRepository
from djsync.utils.dates import today_bounds


def apply_genre_change(
    event: Event, user_id: int, new_genre: str, media_link: Optional[str] = None
) -> Tuple[Event, bool]:
    """Record ``new_genre`` for a guest and keep the event's genre counts in step.

    The guest is added to the event if not registered yet. Returns the event and
    whether any genre count changed. Pure in-memory mutation: no session access.
    """
    guest = event.find_guest(user_id)
    if guest is None:
        guest = EventGuest(user_id=user_id, genre_choice="", media_link="")
        event.guests.append(guest)

    old_genre = guest.genre_choice or ""
    guest.genre_choice = new_genre
    if media_link:
        guest.media_link = media_link

    if old_genre == new_genre:
        return event, False

    if old_genre:
        old_stat = event.find_genre_stat(old_genre)
        if old_stat is not None:
            old_stat.count = max(0, (old_stat.count or 0) - 1)

    new_stat = event.find_genre_stat(new_genre)
    if new_stat is not None:
        new_stat.count = (new_stat.count or 0) + 1
    else:
        event.genre_stats.append(EventGenreStat(genre_name=new_genre, count=1))

    return event, True


class GenreService:
    @staticmethod
    def save_event_genre_change(
        event: Event, user_id: int, genre: str, media_link: Optional[str] = None
    ) -> bool:
        """Apply a genre change to a loaded event and commit it.

        Raises ConflictError when another request committed the event first.
        """
        event_id = event.id
        _, changed = apply_genre_change(event, user_id, genre, media_link)
        # Touch the parent row so the version check runs even if only children changed
        event.updated_at = datetime.now(pytz.UTC)
        try:
            db.session.commit()
        except (StaleDataError, IntegrityError):
            db.session.rollback()
            current_app.logger.warning(
                f"Concurrent update detected on event {event_id} while user {user_id} selected '{genre}'"
            )
            raise ConflictError()
        current_app.logger.info(
            f"User {user_id} selected genre '{genre}' for event {event_id} (aggregate changed: {changed})"
        )
        return changed

    @staticmethod
    def sync_user_genre(user_id: int, genre: str, media_link: Optional[str] = None):
        """Mirror the genre onto the user record. Failures are logged, never raised."""
        try:
            user = UserRepository.find_by_id(user_id)
            if not user:
                current_app.logger.warning(f"Genre sync skipped, user {user_id} not found")
                return
            attrs = {"genre_choice": genre, "genre_selected_at": datetime.now(pytz.UTC)}
            if media_link:
                attrs["media_link"] = media_link
            UserRepository.update_user(user, attrs)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Failed to sync genre onto user {user_id}: {str(e)}")

    @staticmethod
    def select_genre(
        event_id: Optional[int],
        user_id: int,
        genre: str,
        media_link: Optional[str] = None,
        require_registration: bool = False,
    ):
        if event_id is None:
            return GenreService.select_profile_genre(user_id, genre, media_link)

        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        if require_registration and event.find_guest(user_id) is None:
            raise NotFoundError("User not registered for this event")

        changed = GenreService.save_event_genre_change(event, user_id, genre, media_link)
        GenreService.sync_user_genre(user_id, genre, media_link)
        return {"event": event, "aggregate_changed": changed}

    @staticmethod
    def select_profile_genre(user_id: int, genre: str, media_link: Optional[str] = None):
        """Update the user's own genre and carry it into current and upcoming events."""
        user = UserRepository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        attrs = {"genre_choice": genre, "genre_selected_at": datetime.now(pytz.UTC)}
        if media_link:
            attrs["media_link"] = media_link
        user = UserRepository.update_user(user, attrs)

        start_of_today, _ = today_bounds(current_app.config["APP_TIMEZONE"])
        updated_events = []
        for event in EventRepository.get_events_for_guest(user_id, since=start_of_today):
            GenreService.save_event_genre_change(event, user_id, genre, media_link)
            updated_events.append(event.id)

        current_app.logger.info(
            f"User {user_id} set profile genre '{genre}', propagated to events {updated_events}"
        )
        return {"user": user, "updated_event_ids": updated_events}

    @staticmethod
    def get_user_genre(user_id: int) -> str:
        user: User = UserRepository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not user.genre_choice:
            raise NotFoundError("Genre not found")
        return user.genre_choice
