from djsync.models.user import User
from djsync.models.event import Event
from djsync.models.event_guest import EventGuest
from djsync.models.event_genre_stat import EventGenreStat
from djsync.models.activation_serial import ActivationSerial
from djsync.models.enums import Gender, UserRole, AuthProvider
