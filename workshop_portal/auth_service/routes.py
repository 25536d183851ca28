"""
User API route handlers.

Provides routes for:
- Signup and signin
- Profile update, password change, account deletion
- Admin user listing, block toggling, deletion
- Admin grant/revoke of workshop-creation access

Business rules live in `auth_service.service`; this module only moves data
between HTTP and the service.
"""

import logging
from typing import Tuple

from flask import Blueprint, Response, jsonify, request

from workshop_portal.auth_service.models import (
    DeleteAccountRequest,
    PasswordChangeRequest,
    ProfileFields,
    SigninRequest,
    SignupRequest,
    User,
)
from workshop_portal.auth_service.service import UserService
from workshop_portal.auth_service.utils import AuthGate
from workshop_portal.errors import PortalError
from workshop_portal.validation import json_body, parse_body


def create_user_blueprint(users: UserService, gate: AuthGate) -> Blueprint:
    """
    Build the /userApi blueprint around an injected service and auth gate.
    """
    bp = Blueprint("users", __name__)

    # --- REQUEST LOGGING ---
    @bp.before_request
    def before_request() -> None:
        logging.info(f"[Users] Incoming {request.method} {request.path}")

    @bp.after_request
    def after_request(response: Response) -> Response:
        logging.info(f"[Users] Response {response.status}")
        return response

    # --- SIGNUP ---
    @bp.route("/signup", methods=["POST"])
    def signup() -> Tuple[Response, int]:
        """
        Register a new user.

        Expects JSON: { username, password, fullName?, email?, department?,
        designation?, bio? }

        Returns:
            201: User created.
            400: Missing username or password.
            409: Username already exists.
        """
        body = parse_body(SignupRequest)
        profile = ProfileFields.model_validate(body.model_dump())
        users.signup(body.username, body.password, profile)
        return jsonify({"message": "User created successfully"}), 201

    # --- SIGNIN ---
    @bp.route("/signin", methods=["POST"])
    def signin() -> Tuple[Response, int]:
        """
        Authenticate and return a token.

        Logical failures (unknown user, blocked, wrong password) are answered
        with HTTP 200 and a `message` but no `token`; clients must inspect
        the body.

        Returns:
            200: { message, token, user } or { message }.
        """
        body = parse_body(SigninRequest)
        try:
            token, user = users.signin(body.username, body.password)
        except PortalError as e:
            logging.info(f"[Users] Signin refused for {body.username}: {e.message}")
            return jsonify({"message": e.message}), 200

        return jsonify({
            "message": "Login Successful!!",
            "token": token,
            "user": user.to_public_dict(),
        }), 200

    # --- PROFILE ---
    @bp.route("/updateProfile", methods=["PUT"])
    @gate.login_required
    def update_profile(user: User) -> Tuple[Response, int]:
        """
        Update the caller's profile fields.

        Returns:
            200: { message, user }
            400: Nothing changed.
        """
        updated = users.update_profile(user, parse_body(ProfileFields))
        return jsonify({
            "message": "Profile updated successfully",
            "user": updated.to_public_dict(),
        }), 200

    @bp.route("/changePassword", methods=["PUT"])
    @gate.login_required
    def change_password(user: User) -> Tuple[Response, int]:
        """
        Expects JSON: { currentPassword, newPassword }

        Returns:
            200: Password changed.
            400: New password missing.
            401: Current password is incorrect.
        """
        body = parse_body(PasswordChangeRequest)
        users.change_password(user, body.currentPassword, body.newPassword)
        return jsonify({"message": "Password changed successfully"}), 200

    @bp.route("/deleteAccount", methods=["DELETE"])
    @gate.login_required
    def delete_account(user: User) -> Tuple[Response, int]:
        """
        Expects JSON: { password }

        Returns:
            200: Account deleted.
            400: Password is not a string.
            401: Password is incorrect.
        """
        body = parse_body(DeleteAccountRequest)
        users.delete_account(user, body.password)
        return jsonify({"message": "Account deleted successfully"}), 200

    # --- ADMIN ---
    @bp.route("/allUsers", methods=["GET"])
    @gate.admin_required
    def all_users(admin: User) -> Tuple[Response, int]:
        """Admin-only: list every user."""
        return jsonify({"users": [u.to_public_dict() for u in users.list_users()]}), 200

    @bp.route("/deleteUser/<int:user_id>", methods=["DELETE"])
    @gate.admin_required
    def delete_user(admin: User, user_id: int) -> Tuple[Response, int]:
        """
        Admin-only: delete another user.

        Returns:
            200: Deleted.
            400: Target is the caller.
            404: No such user.
        """
        users.delete_user(admin, user_id)
        return jsonify({"message": "User deleted successfully"}), 200

    @bp.route("/toggleBlockUser/<int:user_id>", methods=["PUT"])
    @gate.admin_required
    def toggle_block_user(admin: User, user_id: int) -> Tuple[Response, int]:
        """
        Admin-only: set (or invert) another user's block flag.

        Expects JSON: { isBlocked?: bool | "true" | "false" }
        """
        updated = users.toggle_block(admin, user_id, json_body().get("isBlocked"))
        state = "blocked" if updated.is_blocked else "unblocked"
        return jsonify({
            "message": f"User {state} successfully",
            "user": updated.to_public_dict(),
        }), 200

    @bp.route("/grant-create-access/<int:user_id>", methods=["POST"])
    @gate.admin_required
    def grant_create_access(admin: User, user_id: int) -> Tuple[Response, int]:
        """
        Admin-only: allow a user to create workshops.

        Expects JSON: { expiryDate?: "YYYY-MM-DD" }
        """
        updated = users.grant_create_access(admin, user_id, json_body().get("expiryDate"))
        return jsonify({
            "message": "Create access granted successfully",
            "user": updated.to_public_dict(),
        }), 200

    @bp.route("/revoke-create-access/<int:user_id>", methods=["POST"])
    @gate.admin_required
    def revoke_create_access(admin: User, user_id: int) -> Tuple[Response, int]:
        """Admin-only: withdraw a user's workshop-creation access."""
        updated = users.revoke_create_access(admin, user_id)
        return jsonify({
            "message": "Create access revoked successfully",
            "user": updated.to_public_dict(),
        }), 200

    return bp
