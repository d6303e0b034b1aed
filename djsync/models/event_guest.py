from djsync.extensions import db


class EventGuest(db.Model):
    __tablename__ = "events_guests"

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(
        db.Integer, db.ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    genre_choice = db.Column(db.String(100), nullable=False, default="")
    media_link = db.Column(db.String(500), nullable=False, default="")
    registered_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )

    event = db.relationship("Event", back_populates="guests")
    user = db.relationship("User")

    # A guest can only be registered for an event once
    __table_args__ = (
        db.UniqueConstraint("event_id", "user_id", name="uq_event_guest"),
    )

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "user_name": self.user.name if self.user else "Unknown User",
            "genre_choice": self.genre_choice or "",
            "media_link": self.media_link or "",
        }

    def __repr__(self):
        return (
            f"EventGuest("
            f"event_id={self.event_id}, "
            f"user_id={self.user_id}, "
            f"genre_choice='{self.genre_choice}'"
            f")"
        )
