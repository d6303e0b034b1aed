from djsync.services.genre_service import GenreService, apply_genre_change
from djsync.services.registration_service import RegistrationService
from djsync.services.serial_service import SerialService
from djsync.services.event_service import EventService
from djsync.services.user_service import UserService
from djsync.services.stats_service import StatsService
