from flask import Blueprint, jsonify, request, current_app
from flask_jwt_extended import jwt_required, current_user
from djsync.extensions import db, limiter
from djsync.exceptions import (
    AlreadyRegisteredError,
    ConflictError,
    NotFoundError,
    SerialActivationError,
    UnauthorizedError,
)
from djsync.schemas import (
    AssignUserSchema,
    EventCreateSchema,
    EventUpdateSchema,
    GenreSelectSchema,
    GenreUpdateSchema,
    SerialSchema,
    validate_payload,
)
from djsync.services.event_service import EventService
from djsync.services.genre_service import GenreService
from djsync.services.registration_service import RegistrationService
from djsync.services.serial_service import SerialService

event_bp = Blueprint("event", __name__)


def _validation_failed(result):
    return jsonify({"error": "Validation failed", "details": result.errors}), 400


def _internal_error(action: str, e: Exception):
    db.session.rollback()
    current_app.logger.error(f"Error {action}: {str(e)}", exc_info=True)
    return jsonify({"error": "An unexpected error occurred"}), 500


@event_bp.route("", methods=["GET"])
def get_all_events():
    try:
        events = EventService.get_events()
        return jsonify([event.to_dict() for event in events]), 200
    except Exception as e:
        return _internal_error("fetching all events", e)


@event_bp.route("", methods=["POST"])
@jwt_required()
def create_event():
    if not current_user.is_dj:
        return jsonify({"error": "Forbidden. Only DJs can create events."}), 403

    result = validate_payload(EventCreateSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)

    try:
        event = EventService.create_event(result.value, current_user)
        return jsonify({"message": "Event created successfully!", "event": event.to_dict()}), 201
    except UnauthorizedError as e:
        return jsonify({"error": str(e)}), 403
    except Exception as e:
        return _internal_error("creating event", e)


@event_bp.route("/live", methods=["GET"])
@jwt_required()
def get_live_events():
    try:
        events = EventService.get_live_events(current_user)
        # Always 200 with an array, possibly empty
        return jsonify([EventService.live_projection(event) for event in events]), 200
    except Exception as e:
        return _internal_error("fetching live events", e)


@event_bp.route("/mine", methods=["GET"])
@jwt_required()
def get_my_events():
    try:
        events = EventService.get_events_for_dj(current_user)
        return jsonify([event.to_dict() for event in events]), 200
    except UnauthorizedError as e:
        return jsonify({"error": str(e)}), 403
    except Exception as e:
        return _internal_error("fetching DJ events", e)


@event_bp.route("/history", methods=["GET"])
@jwt_required()
def get_event_history():
    try:
        events = EventService.get_history_events(current_user)
        return jsonify([EventService.live_projection(event) for event in events]), 200
    except UnauthorizedError as e:
        return jsonify({"error": str(e)}), 403
    except Exception as e:
        return _internal_error("fetching event history", e)


@event_bp.route("/user/<int:user_id>", methods=["GET"])
def get_events_for_user(user_id):
    try:
        events = EventService.get_events_by_owner(user_id)
        return jsonify([event.to_dict(include_guests=False) for event in events]), 200
    except Exception as e:
        return _internal_error(f"fetching events for user {user_id}", e)


@event_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id):
    try:
        event = EventService.get_event(event_id)
        return jsonify(event.to_dict()), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        return _internal_error(f"fetching event {event_id}", e)


@event_bp.route("/<int:event_id>/dj", methods=["GET"])
def get_event_dj(event_id):
    try:
        return jsonify({"dj_name": EventService.get_event_dj_name(event_id)}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        return _internal_error(f"fetching DJ for event {event_id}", e)


@event_bp.route("/<int:event_id>", methods=["PUT"])
@jwt_required()
def update_event(event_id):
    result = validate_payload(EventUpdateSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)

    try:
        event = EventService.update_event(event_id, result.value, current_user)
        return jsonify(event.to_dict()), 200
    except UnauthorizedError as e:
        return jsonify({"error": str(e)}), 403
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception as e:
        return _internal_error(f"updating event {event_id}", e)


@event_bp.route("/<int:event_id>", methods=["DELETE"])
@jwt_required()
def delete_event(event_id):
    try:
        return jsonify(EventService.delete_event(event_id, current_user)), 200
    except UnauthorizedError as e:
        return jsonify({"error": str(e)}), 403
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception as e:
        return _internal_error(f"deleting event {event_id}", e)


@event_bp.route("/assign-user", methods=["POST"])
@limiter.limit("60 per minute")
def assign_user():
    result = validate_payload(AssignUserSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)
    data = result.value

    try:
        RegistrationService.assign(data.event_id, data.user_id)
        event = EventService.get_event(data.event_id)
        return jsonify({"message": "User successfully assigned to event", "event": event.to_dict()}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except AlreadyRegisteredError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        return _internal_error("assigning user to event", e)


@event_bp.route("/<int:event_id>/genre-update", methods=["PUT"])
@jwt_required()
@limiter.limit("120 per minute")
def genre_update(event_id):
    result = validate_payload(GenreUpdateSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)
    data = result.value

    try:
        # Guests may only change their own choice; the owning DJ may change anyone's
        if data.user_id != current_user.id:
            event = EventService.get_event(event_id)
            if not (current_user.is_dj and event.user_id == current_user.id):
                return jsonify({"error": "Forbidden"}), 403

        outcome = GenreService.select_genre(
            event_id,
            data.user_id,
            data.genre_choice,
            data.media_link,
            require_registration=True,
        )
        return jsonify(
            {
                "message": "Genre updated successfully",
                "event": EventService.live_projection(outcome["event"]),
                "aggregate_changed": outcome["aggregate_changed"],
            }
        ), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception as e:
        return _internal_error(f"updating genre for event {event_id}", e)


@event_bp.route("/<int:event_id>/genre-select", methods=["POST"])
@jwt_required()
@limiter.limit("120 per minute")
def genre_select(event_id):
    result = validate_payload(GenreSelectSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)
    data = result.value

    try:
        outcome = GenreService.select_genre(
            event_id, current_user.id, data.genre_choice, data.media_link
        )
        return jsonify(
            {
                "message": "Genre updated successfully",
                "event": EventService.live_projection(outcome["event"]),
                "aggregate_changed": outcome["aggregate_changed"],
            }
        ), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception as e:
        return _internal_error(f"selecting genre for event {event_id}", e)


@event_bp.route("/validate-serial", methods=["POST"])
@jwt_required(optional=True)
@limiter.limit("20 per minute")
def validate_serial():
    result = validate_payload(SerialSchema, request.get_json(silent=True))
    if not result.ok:
        return _validation_failed(result)

    try:
        SerialService.activate(result.value.serial, current_user.id if current_user else None)
        return jsonify({"message": "Serial number validated and activated."}), 200
    except SerialActivationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        return _internal_error("validating serial", e)


@event_bp.route("/<int:event_id>/qr-code", methods=["GET"])
@jwt_required()
def get_event_qr_code(event_id):
    try:
        return jsonify({"qr_code": EventService.get_event_qr_code(event_id)}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        return _internal_error(f"generating QR code for event {event_id}", e)
