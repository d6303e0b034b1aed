from djsync.extensions import db


class Event(db.Model):
    __tablename__ = "events"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    dj_name = db.Column(db.String(100), nullable=True)
    event_name = db.Column(db.String(255), nullable=False)
    event_location = db.Column(db.String(255), nullable=True)
    event_date = db.Column(db.TIMESTAMP(timezone=True), nullable=False, index=True)
    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )
    updated_at = db.Column(
        db.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    dj = db.relationship("User", foreign_keys=[user_id])
    guests = db.relationship(
        "EventGuest",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventGuest.id",
    )
    genre_stats = db.relationship(
        "EventGenreStat",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventGenreStat.id",
    )

    # Every UPDATE of an event row checks and bumps the version.
    __mapper_args__ = {"version_id_col": version}

    def find_guest(self, user_id: int):
        for guest in self.guests:
            if guest.user_id == user_id:
                return guest
        return None

    def find_genre_stat(self, genre_name: str):
        for stat in self.genre_stats:
            if stat.genre_name == genre_name:
                return stat
        return None

    def to_dict(self, include_guests: bool = True):
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "dj_name": self.dj_name or (self.dj.name if self.dj else "Unknown DJ"),
            "event_name": self.event_name,
            "event_location": self.event_location,
            "event_date": self.event_date.isoformat() if self.event_date else None,
            "genre_stats": [stat.to_dict() for stat in self.genre_stats],
        }
        if include_guests:
            data["registered_users"] = [guest.to_dict() for guest in self.guests]
        return data

    def __repr__(self):
        return (
            f"Event("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"event_name='{self.event_name}', "
            f"event_date={self.event_date}"
            f")"
        )
