from djsync.extensions import db


class ActivationSerial(db.Model):
    __tablename__ = "activation_serials"

    id = db.Column(db.Integer, primary_key=True)
    serial = db.Column(db.String(64), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=False)
    dj_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    activated_at = db.Column(db.TIMESTAMP(timezone=True), nullable=True)
    created_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )

    def __repr__(self):
        return f"<ActivationSerial serial={self.serial} is_active={self.is_active}>"
