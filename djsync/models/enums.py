from enum import Enum


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class UserRole(Enum):
    GUEST = "guest"
    DJ = "dj"


class AuthProvider(Enum):
    GOOGLE = "google"
    FACEBOOK = "facebook"
