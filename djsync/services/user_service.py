import logging
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError
from djsync.extensions import db
from djsync.exceptions import NotFoundError
from djsync.models import User
from djsync.models.enums import Gender, UserRole
from djsync.repositories import UserRepository
from djsync.schemas import ProfileUpdateSchema, RegisterSchema
from djsync.utils.qr import make_qr_data_url

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(identity=str(user.id))

    @staticmethod
    def register(data: RegisterSchema):
        existing_user = UserRepository.find_by_email(data.email)
        if existing_user:
            logger.warning(f"Registration attempt with existing email: {data.email}")
            raise ValueError("User already exists")

        # Manual registration marks the profile complete; phone and gender are optional
        user = User(
            name=data.name,
            email=data.email,
            phone_number=data.phone_number,
            gender=Gender(data.gender) if data.gender else None,
            role=UserRole.GUEST,
            genre_choice="",
            media_link="",
            profile_completed=True,
            is_profile_complete=True,
            auth_provider=None,
        )
        try:
            db.session.add(user)
            db.session.flush()
            user.qr_code_data_url = make_qr_data_url(str(user.id))
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.warning(f"Registration lost a race on email: {data.email}")
            raise ValueError("User already exists")

        logger.info(f"User registered successfully: {user.email}")
        return {"token": UserService.issue_token(user), "user": user.to_dict()}

    @staticmethod
    def login(email: str):
        user = UserRepository.find_by_email(email)
        if not user:
            logger.warning(f"Login attempt with non-existent email: {email}")
            raise ValueError("Invalid email")

        logger.info(f"User logged in successfully: {email}")
        return {"token": UserService.issue_token(user), "user": user.to_dict()}

    @staticmethod
    def update_profile(user: User, data: ProfileUpdateSchema) -> User:
        # Fields left out of the request keep their stored value
        attrs = data.model_dump(exclude_unset=True)
        if "gender" in attrs:
            attrs["gender"] = Gender(attrs["gender"]) if attrs["gender"] else None
        attrs.update(profile_completed=True, is_profile_complete=True)
        user = UserRepository.update_user(user, attrs)
        logger.info(f"Profile completed for user {user.id}")
        return user

    @staticmethod
    def get_qr_code(user_id: int) -> str:
        """Return the user's QR payload, generating and caching it on first use."""
        user = UserRepository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not user.qr_code_data_url:
            UserRepository.update_user(user, {"qr_code_data_url": make_qr_data_url(str(user.id))})
        return user.qr_code_data_url

    @staticmethod
    def get_dj_name(dj_id: int) -> str:
        dj = UserRepository.find_dj_by_id(dj_id)
        if not dj:
            raise NotFoundError("DJ not found")
        return dj.name

    @staticmethod
    def get_djs():
        return [{"id": dj.id, "name": dj.name, "email": dj.email} for dj in UserRepository.get_djs()]

