from flask import Blueprint, Response, current_app, jsonify, make_response, request, stream_with_context
from flask_jwt_extended import (
    current_user,
    jwt_required,
    set_access_cookies,
    unset_jwt_cookies,
)
from djsync.extensions import db, limiter
from djsync.exceptions import (
    AlreadyRegisteredError,
    ConflictError,
    NotFoundError,
    SerialActivationError,
    UnauthorizedError,
)
from djsync.schemas import (
    LoginSchema,
    ProfileUpdateSchema,
    RegisterSchema,
    ScanQrSchema,
    SerialSchema,
    UserGenreSchema,
    validate_payload,
)
from djsync.services.genre_service import GenreService
from djsync.services.registration_service import RegistrationService
from djsync.services.serial_service import SerialService
from djsync.services.stats_service import StatsService
from djsync.services.user_service import UserService

user_bp = Blueprint("user", __name__)


def _validation_failed(result):
    return jsonify({"error": "Validation failed", "details": result.errors}), 400


def _internal_error(action: str, e: Exception):
    db.session.rollback()
    current_app.logger.error(f"Error {action}: {str(e)}", exc_info=True)
    return jsonify({"error": "An unexpected error occurred"}), 500


def _with_token_cookie(body: dict, status: int):
    response = make_response(jsonify(body), status)
    set_access_cookies(response, body["token"])
    return response


@user_bp.route("/register", methods=["POST"])
@limiter.limit("30 per hour")
def register():
    result = validate_payload(RegisterSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)

    try:
        outcome = UserService.register(result.value)
        return _with_token_cookie({"message": "Registration successful", **outcome}, 201)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        return _internal_error("registering user", e)


@user_bp.route("/login", methods=["POST"])
@limiter.limit("20 per 15 minutes")
def login():
    result = validate_payload(LoginSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)

    try:
        outcome = UserService.login(result.value.email)
        return _with_token_cookie({"message": "Login successful", **outcome}, 200)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        return _internal_error("logging in", e)


@user_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    response = make_response(jsonify({"message": "Logout successful"}), 200)
    unset_jwt_cookies(response)
    return response


@user_bp.route("/check-auth", methods=["GET"])
@jwt_required()
def check_auth():
    return jsonify(
        {"is_authenticated": True, "is_dj": current_user.is_dj, "user": current_user.to_dict()}
    ), 200


@user_bp.route("/check-admin", methods=["GET"])
@jwt_required()
def check_admin():
    return jsonify({"is_dj": current_user.is_dj}), 200


@user_bp.route("/current-user", methods=["GET"])
@jwt_required()
def get_current_user():
    return jsonify(current_user.to_dict()), 200


@user_bp.route("/update-profile", methods=["POST"])
@jwt_required()
def update_profile():
    result = validate_payload(ProfileUpdateSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)

    try:
        user = UserService.update_profile(current_user, result.value)
        return jsonify({"message": "Profile updated successfully", "user": user.to_dict()}), 200
    except Exception as e:
        return _internal_error("updating profile", e)


@user_bp.route("/update-genre", methods=["POST"])
@jwt_required()
@limiter.limit("120 per minute")
def update_genre():
    result = validate_payload(UserGenreSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)
    data = result.value

    try:
        outcome = GenreService.select_genre(None, current_user.id, data.genre, data.media_link)
        user = outcome["user"]
        return jsonify(
            {
                "message": "Genre and media link updated successfully",
                "user": user.to_dict(),
                "profile_completed": bool(user.profile_completed),
                "updated_event_ids": outcome["updated_event_ids"],
            }
        ), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception as e:
        return _internal_error("updating genre", e)


@user_bp.route("/scan-qr", methods=["POST"])
@jwt_required()
@limiter.limit("60 per minute")
def scan_qr():
    result = validate_payload(ScanQrSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)

    try:
        outcome = RegistrationService.join_live_event_by_dj(
            result.value.qr_code_identifier, current_user.id
        )
        dj, event = outcome["dj"], outcome["event"]
        return jsonify(
            {
                "message": f"Successfully joined DJ {dj.name}'s event!",
                "event_id": event.id,
                "event_name": event.event_name,
                "event_location": event.event_location,
                "event_date": event.event_date.isoformat() if event.event_date else None,
            }
        ), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except AlreadyRegisteredError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception as e:
        return _internal_error("processing QR code scan", e)


@user_bp.route("/verify-serial", methods=["POST"])
@jwt_required()
@limiter.limit("20 per minute")
def verify_serial():
    result = validate_payload(SerialSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)

    try:
        SerialService.activate(result.value.serial, current_user.id)
        return jsonify({"message": "You are now registered as a DJ"}), 200
    except SerialActivationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        return _internal_error("verifying serial", e)


@user_bp.route("/generate-qr/<int:user_id>", methods=["GET"])
def generate_qr(user_id):
    try:
        return jsonify({"qr_code_data_url": UserService.get_qr_code(user_id)}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        return _internal_error(f"generating QR code for user {user_id}", e)


@user_bp.route("/dj-info/<int:dj_id>", methods=["GET"])
def dj_info(dj_id):
    try:
        return jsonify({"dj_name": UserService.get_dj_name(dj_id)}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        return _internal_error(f"fetching DJ info for {dj_id}", e)


@user_bp.route("/djs", methods=["GET"])
def get_djs():
    try:
        return jsonify(UserService.get_djs()), 200
    except Exception as e:
        return _internal_error("fetching DJs", e)


@user_bp.route("/user-stats", methods=["GET"])
@jwt_required()
def user_stats():
    try:
        return jsonify(StatsService.get_user_stats(current_user)), 200
    except UnauthorizedError as e:
        return jsonify({"error": str(e)}), 403
    except Exception as e:
        return _internal_error("computing user stats", e)


@user_bp.route("/download-user-details", methods=["GET"])
@jwt_required()
def download_user_details():
    try:
        rows = StatsService.export_user_details(current_user)
    except UnauthorizedError as e:
        return jsonify({"error": str(e)}), 403
    except Exception as e:
        return _internal_error("exporting user details", e)

    return Response(
        stream_with_context(rows),
        mimetype="text/csv",
        headers={"Content-Disposition": 'attachment; filename="user-details.csv"'},
    )
