from datetime import datetime
from typing import Optional
import pytz
from flask import current_app
from djsync.extensions import db
from djsync.exceptions import SerialActivationError
from djsync.models.enums import UserRole
from djsync.repositories import SerialRepository, UserRepository


class SerialService:
    @staticmethod
    def activate(code: str, user_id: Optional[int] = None) -> bool:
        """Consume a one-time serial, promoting ``user_id`` to DJ when given.

        Missing and already-active codes raise the same SerialActivationError.
        """
        serial = SerialRepository.find_by_serial(code)
        if not serial or serial.is_active:
            current_app.logger.warning(f"Invalid serial activation attempt by user {user_id}")
            raise SerialActivationError()

        user = None
        if user_id is not None:
            user = UserRepository.find_by_id(user_id)
            if not user:
                raise SerialActivationError()

        if not SerialRepository.mark_active(serial.id, datetime.now(pytz.UTC), user.id if user else None):
            db.session.rollback()
            current_app.logger.warning(f"Serial {serial.id} was activated concurrently")
            raise SerialActivationError()

        if user:
            user.role = UserRole.DJ
        db.session.commit()

        current_app.logger.info(
            f"Serial {serial.id} activated" + (f", user {user_id} promoted to DJ" if user else "")
        )
        return True
