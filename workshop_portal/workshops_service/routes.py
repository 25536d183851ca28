"""
Workshop API route handlers: create, list, filter, edit and delete workshops.

Reads are public; create requires a signed-in user; edit and delete are
limited to the workshop's creator and admins.
"""

import logging
from typing import Tuple

from flask import Blueprint, Response, jsonify, request

from workshop_portal.auth_service.models import User
from workshop_portal.auth_service.utils import AuthGate
from workshop_portal.validation import parse_body
from workshop_portal.workshops_service.models import WorkshopCreate, WorkshopPatch
from workshop_portal.workshops_service.service import WorkshopService


def create_workshop_blueprint(workshops: WorkshopService, gate: AuthGate) -> Blueprint:
    """
    Build the /workshopApi blueprint around an injected service and auth gate.
    """
    bp = Blueprint("workshops", __name__)

    @bp.before_request
    def before_request() -> None:
        logging.info(f"[Workshops] Incoming {request.method} {request.path}")

    @bp.after_request
    def after_request(response: Response) -> Response:
        logging.info(f"[Workshops] Response {response.status}")
        return response

    @bp.route("/create", methods=["POST"])
    @gate.login_required
    def create(user: User) -> Tuple[Response, int]:
        """
        Create a workshop owned by the caller. Any `createdBy` in the body
        is ignored.

        Returns:
            201: { message, id }
            400: Missing eventTitle.
            403: Create access required and missing/expired.
            409: Title already exists.
        """
        workshop_id = workshops.create(user, parse_body(WorkshopCreate))
        return jsonify({"message": "Workshop Created Successfully!!", "id": workshop_id}), 201

    @bp.route("/getwks", methods=["GET"])
    def get_workshops() -> Tuple[Response, int]:
        """Public: every workshop."""
        return jsonify({"Workshops": workshops.list_all()}), 200

    @bp.route("/sortedgetwks", methods=["GET"])
    def sorted_workshops() -> Tuple[Response, int]:
        """Public: every workshop, earliest start date first."""
        return jsonify({"message": "Retrieved Successfully", "details": workshops.list_sorted()}), 200

    @bp.route("/selectedwks/<cat>", methods=["GET"])
    def selected_workshops(cat: str) -> Tuple[Response, int]:
        """Public: workshops in one category. No match is an empty list, not a 404."""
        return jsonify({"message": "Successful retrieval", "details": workshops.list_by_category(cat)}), 200

    @bp.route("/myworkshops", methods=["GET"])
    @gate.login_required
    def my_workshops(user: User) -> Tuple[Response, int]:
        return jsonify({
            "message": "Retrieved user workshops successfully",
            "workshops": workshops.list_by_owner(user),
        }), 200

    @bp.route("/workshop/<path:event_title>", methods=["GET"])
    def get_workshop(event_title: str) -> Tuple[Response, int]:
        """Public: one workshop by title, 404 if absent."""
        return jsonify({"Workshop": workshops.get(event_title)}), 200

    @bp.route("/editwks/<path:event_title>", methods=["PUT"])
    @gate.login_required
    def edit_workshop(user: User, event_title: str) -> Tuple[Response, int]:
        """
        Partially update a workshop.

        Returns:
            200: { message, details }
            304: Nothing changed.
            403: Caller is neither creator nor admin.
            404: Workshop not found.
        """
        updated = workshops.update(user, event_title, parse_body(WorkshopPatch))
        return jsonify({"message": "Update successful", "details": updated}), 200

    @bp.route("/delwks/<path:event_title>", methods=["DELETE"])
    @gate.login_required
    def delete_workshop(user: User, event_title: str) -> Tuple[Response, int]:
        """
        Returns:
            200: Deleted.
            403: Caller is neither creator nor admin.
            404: Workshop not found.
            500: Store deleted nothing.
        """
        workshops.delete(user, event_title)
        return jsonify({"message": "Deleted Successfully!!"}), 200

    return bp
