from djsync.extensions import db
from .enums import Gender, UserRole, AuthProvider


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    phone_number = db.Column(db.String(20), nullable=True)
    gender = db.Column(db.Enum(Gender), nullable=True)
    role = db.Column(db.Enum(UserRole), nullable=False, default=UserRole.GUEST)
    genre_choice = db.Column(db.String(100), nullable=False, default="")
    media_link = db.Column(db.String(500), nullable=False, default="")
    genre_selected_at = db.Column(db.TIMESTAMP(timezone=True), nullable=True)
    google_id = db.Column(db.String(255), nullable=True)
    facebook_id = db.Column(db.String(255), nullable=True)
    auth_provider = db.Column(db.Enum(AuthProvider), nullable=True)
    profile_completed = db.Column(db.Boolean, nullable=False, default=False)
    is_profile_complete = db.Column(db.Boolean, nullable=False, default=False)
    qr_code_data_url = db.Column(db.Text, nullable=True)
    updated_at = db.Column(
        db.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )
    created_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )

    @property
    def is_dj(self) -> bool:
        return self.role == UserRole.DJ

    def __eq__(self, other: object) -> bool:
        if isinstance(other, User):
            return self.id == other.id
        return False

    def __hash__(self):
        return hash(self.id)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone_number": self.phone_number,
            "gender": self.gender.value if self.gender else None,
            "role": self.role.value if self.role else None,
            "is_dj": self.is_dj,
            "genre_choice": self.genre_choice or "",
            "media_link": self.media_link or "",
            "genre_selected_at": (
                self.genre_selected_at.isoformat() if self.genre_selected_at else None
            ),
            "auth_provider": self.auth_provider.value if self.auth_provider else None,
            "profile_completed": bool(self.profile_completed),
            "is_profile_complete": bool(self.is_profile_complete),
            "qr_code_data_url": self.qr_code_data_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return (
            f"User("
            f"id={self.id}, "
            f"name='{self.name}', "
            f"email='{self.email}', "
            f"role={self.role}"
            f")"
        )
