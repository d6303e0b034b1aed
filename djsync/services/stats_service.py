from typing import Iterator
from djsync.exceptions import UnauthorizedError
from djsync.models import User
from djsync.models.enums import Gender
from djsync.repositories import EventGuestRepository
from djsync.utils.csv_export import iter_user_details_csv


class StatsService:
    @staticmethod
    def _require_dj(user: User):
        if not user or not user.is_dj:
            raise UnauthorizedError("Forbidden")

    @staticmethod
    def get_user_stats(user: User) -> dict:
        """Unique guests across the DJ's events, how many picked a genre, and gender split."""
        StatsService._require_dj(user)

        has_genre = {}
        guests_by_id = {}
        for registration in EventGuestRepository.find_by_dj(user.id):
            has_genre.setdefault(registration.user_id, False)
            if registration.genre_choice and registration.genre_choice.strip():
                has_genre[registration.user_id] = True
            if registration.user is not None:
                guests_by_id[registration.user_id] = registration.user

        males = sum(1 for g in guests_by_id.values() if g.gender == Gender.MALE)
        females = sum(1 for g in guests_by_id.values() if g.gender == Gender.FEMALE)

        return {
            "total_users": len(has_genre),
            "genre_choices": sum(1 for picked in has_genre.values() if picked),
            "males": males,
            "females": females,
        }

    @staticmethod
    def get_genre_stats(user: User) -> list:
        StatsService._require_dj(user)

        rows = EventGuestRepository.genre_totals_by_dj(user.id)
        total_choices = sum(total for _, total, _, _ in rows)

        stats = []
        for name, total, by_females, by_males in rows:
            stats.append(
                {
                    "name": name,
                    "total_choices": total,
                    "choices_by_females": int(by_females or 0),
                    "choices_by_males": int(by_males or 0),
                    "percentage_distribution": (
                        round(total / total_choices * 100, 2) if total_choices else 0.0
                    ),
                }
            )
        stats.sort(key=lambda s: (-s["total_choices"], s["name"]))
        return stats

    @staticmethod
    def export_user_details(user: User) -> Iterator[str]:
        StatsService._require_dj(user)
        guests = EventGuestRepository.find_guest_users_by_dj(user.id)
        return iter_user_details_csv(guests)
