from flask import jsonify
from djsync.extensions import jwt
from djsync.repositories import UserRepository


@jwt.user_lookup_loader
def load_user(_jwt_header, jwt_data):
    # Resolved against the database on every request, no session cache
    try:
        user_id = int(jwt_data["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    return UserRepository.find_by_id(user_id)


@jwt.user_lookup_error_loader
def user_lookup_error(_jwt_header, _jwt_data):
    return jsonify({"error": "Unauthorized"}), 401


@jwt.unauthorized_loader
def missing_token(reason):
    return jsonify({"error": "Unauthorized"}), 401


@jwt.invalid_token_loader
def invalid_token(reason):
    return jsonify({"error": "Invalid token"}), 401


@jwt.expired_token_loader
def expired_token(_jwt_header, _jwt_data):
    return jsonify({"error": "Token has expired"}), 401
