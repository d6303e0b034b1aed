from typing import List
from djsync.extensions import db
from djsync.models import User
from djsync.models.enums import UserRole


class UserRepository:
    @staticmethod
    def find_by_email(email: str) -> User:
        return User.query.filter_by(email=email).first()

    @staticmethod
    def find_by_id(user_id: int) -> User:
        return User.query.filter_by(id=user_id).first()

    @staticmethod
    def find_dj_by_id(user_id: int) -> User:
        return User.query.filter_by(id=user_id, role=UserRole.DJ).first()

    @staticmethod
    def get_djs() -> List[User]:
        return User.query.filter_by(role=UserRole.DJ).order_by(User.name).all()

    @staticmethod
    def update_user(user: User, attrs: dict) -> User:
        for key, value in attrs.items():
            if hasattr(user, key):
                setattr(user, key, value)
        db.session.commit()
        return user
