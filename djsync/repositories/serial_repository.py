from djsync.extensions import db
from djsync.models import ActivationSerial


class SerialRepository:
    @staticmethod
    def find_by_serial(serial: str) -> ActivationSerial:
        return ActivationSerial.query.filter_by(serial=serial).first()

    @staticmethod
    def create_serial(serial: str) -> ActivationSerial:
        entry = ActivationSerial(serial=serial, is_active=False)
        db.session.add(entry)
        db.session.commit()
        return entry

    @staticmethod
    def mark_active(serial_id: int, activated_at, dj_id: int | None = None) -> bool:
        """Flip is_active false -> true in a single conditional UPDATE.

        Returns False when another request activated the serial first. Does not commit.
        """
        updated = ActivationSerial.query.filter_by(id=serial_id, is_active=False).update(
            {"is_active": True, "activated_at": activated_at, "dj_id": dj_id},
            synchronize_session="fetch",
        )
        return updated == 1
