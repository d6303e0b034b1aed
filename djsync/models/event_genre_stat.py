from djsync.extensions import db


class EventGenreStat(db.Model):
    __tablename__ = "events_genre_stats"

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(
        db.Integer, db.ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    genre_name = db.Column(db.String(100), nullable=False)
    count = db.Column(db.Integer, nullable=False, default=0)

    event = db.relationship("Event", back_populates="genre_stats")

    __table_args__ = (
        db.UniqueConstraint("event_id", "genre_name", name="uq_event_genre"),
        db.CheckConstraint("count >= 0", name="ck_genre_count_non_negative"),
    )

    def to_dict(self):
        return {"genre_name": self.genre_name, "count": self.count}

    def __repr__(self):
        return f"<EventGenreStat event_id={self.event_id} {self.genre_name}={self.count}>"
