from __future__ import annotations

from functools import wraps

from flask import g, jsonify, request

from markshelf.api import api_bp
from markshelf.controllers.add_form import AddBookmarkForm
from markshelf.controllers.list_view import BookmarkListController
from markshelf.controllers.session_gate import SessionGate, current_client
from markshelf.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)

_FORM_ERROR_STATUS = {
    ValidationError: 400,
    AuthError: 401,
    ConflictError: 409,
}


def api_session_required(func):
    @wraps(func)
    def wrapped(*args, **kwargs):
        user = SessionGate(current_client()).check()
        if user is None:
            return jsonify({"error": "authentication required"}), 401
        g.user = user
        return func(*args, **kwargs)

    return wrapped


@api_bp.route("/bookmarks", methods=["GET"])
@api_session_required
def list_bookmarks():
    controller = BookmarkListController(current_client())
    if not controller.refresh():
        return jsonify({"error": "could not load bookmarks"}), 502
    return jsonify({"items": controller.bookmarks})


@api_bp.route("/bookmarks", methods=["POST"])
@api_session_required
def create_bookmark():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Title and URL are required"}), 400
    form = AddBookmarkForm(current_client())
    try:
        created = form.submit(
            str(payload.get("title") or ""), str(payload.get("url") or "")
        )
    except tuple(_FORM_ERROR_STATUS) as exc:
        return jsonify({"error": exc.message}), _FORM_ERROR_STATUS[type(exc)]
    except StoreError as exc:
        return jsonify({"error": exc.message}), 502
    return jsonify(created), 201


@api_bp.route("/bookmarks/<int:bookmark_id>", methods=["DELETE"])
@api_session_required
def delete_bookmark(bookmark_id: int):
    controller = BookmarkListController(current_client())
    if controller.delete(bookmark_id):
        return jsonify({"status": "deleted", "id": bookmark_id})
    if isinstance(controller.last_error, NotFoundError):
        return jsonify({"error": "bookmark not found"}), 404
    return jsonify({"error": "could not delete bookmark"}), 502
