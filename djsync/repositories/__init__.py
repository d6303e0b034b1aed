from djsync.repositories.user_repository import UserRepository
from djsync.repositories.event_repository import EventRepository
from djsync.repositories.event_guest_repository import EventGuestRepository
from djsync.repositories.serial_repository import SerialRepository
