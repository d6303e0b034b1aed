from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from djsync.extensions import db, limiter
from djsync.exceptions import ConflictError, NotFoundError, UnauthorizedError
from djsync.schemas import UserGenreSchema, validate_payload
from djsync.services.genre_service import GenreService
from djsync.services.stats_service import StatsService

genre_bp = Blueprint("genre", __name__)


def _select_profile_genre(user_id, message):
    result = validate_payload(UserGenreSchema, request.get_json(silent=True))
    if not result.ok:
        return jsonify({"error": "Validation failed", "details": result.errors}), 400
    data = result.value

    try:
        outcome = GenreService.select_profile_genre(user_id, data.genre, data.media_link)
        return jsonify({"message": message, "updated_event_ids": outcome["updated_event_ids"]}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error selecting genre for user {user_id}: {str(e)}", exc_info=True)
        return jsonify({"error": "An unexpected error occurred"}), 500


@genre_bp.route("", methods=["POST"])
@jwt_required()
@limiter.limit("120 per minute")
def select_genre():
    return _select_profile_genre(current_user.id, "Genre selected successfully")


@genre_bp.route("/<int:user_id>", methods=["POST"])
@jwt_required()
@limiter.limit("120 per minute")
def set_user_genre(user_id):
    if user_id != current_user.id:
        return jsonify({"error": "Forbidden"}), 403
    return _select_profile_genre(user_id, "Genre updated successfully")


@genre_bp.route("/genre-stats", methods=["GET"])
@jwt_required()
def genre_stats():
    """Per-genre totals across the caller's events (DJ only)."""
    try:
        return jsonify(StatsService.get_genre_stats(current_user)), 200
    except UnauthorizedError as e:
        return jsonify({"error": str(e)}), 403
    except Exception as e:
        current_app.logger.error(f"Error computing genre stats: {str(e)}", exc_info=True)
        return jsonify({"error": "An unexpected error occurred"}), 500


@genre_bp.route("/<int:user_id>", methods=["GET"])
def get_user_genre(user_id):
    try:
        return jsonify({"genre": GenreService.get_user_genre(user_id)}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        current_app.logger.error(f"Error fetching genre for user {user_id}: {str(e)}", exc_info=True)
        return jsonify({"error": "An unexpected error occurred"}), 500
