from __future__ import annotations

import json
import queue

from flask import (
    Response,
    abort,
    current_app,
    flash,
    g,
    jsonify,
    redirect,
    render_template,
    request,
    stream_with_context,
    url_for,
)

from markshelf.controllers.add_form import AddBookmarkForm
from markshelf.controllers.list_view import BookmarkListController
from markshelf.controllers.session_gate import current_client, session_required
from markshelf.errors import AuthError, FormError
from markshelf.services.confirmations import create_delete_token, verify_delete_token
from markshelf.web import web_bp


def _render_list(form: AddBookmarkForm | None = None, status: int = 200):
    controller = BookmarkListController(current_client())
    controller.refresh()
    return (
        render_template(
            "bookmarks.html",
            user=g.user,
            items=controller.bookmarks,
            form=form or AddBookmarkForm(current_client()),
        ),
        status,
    )


def _sse(event: str, payload) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


@web_bp.route("/")
@session_required
def bookmarks():
    return _render_list()


@web_bp.route("/bookmarks", methods=["POST"])
@session_required
def bookmarks_add():
    form = AddBookmarkForm(current_client())
    try:
        form.submit(request.form.get("title"), request.form.get("url"))
    except AuthError:
        return redirect(url_for("auth.login"))
    except FormError as exc:
        flash(exc.message, "error")
        return _render_list(form=form, status=400)

    flash("Bookmark added.", "success")
    return redirect(url_for("web.bookmarks"))


@web_bp.route("/bookmarks/<int:bookmark_id>/delete", methods=["GET"])
@session_required
def bookmarks_delete_request(bookmark_id: int):
    controller = BookmarkListController(current_client())
    controller.refresh()
    confirmation = controller.request_delete(bookmark_id)
    if confirmation is None:
        abort(404)

    token = create_delete_token(
        current_app.config["SECRET_KEY"], g.user.id, bookmark_id
    )
    return render_template(
        "confirm_delete.html", confirmation=confirmation, token=token
    )


@web_bp.route("/bookmarks/<int:bookmark_id>/delete", methods=["POST"])
@session_required
def bookmarks_delete_confirm(bookmark_id: int):
    confirmed = verify_delete_token(
        current_app.config["SECRET_KEY"],
        request.form.get("token") or "",
        max_age=current_app.config["DELETE_CONFIRM_TTL_SECONDS"],
        expected_user_id=g.user.id,
        expected_bookmark_id=bookmark_id,
    )
    if not confirmed:
        flash("Delete confirmation expired. Please try again.", "error")
        return redirect(url_for("web.bookmarks"))

    controller = BookmarkListController(current_client())
    controller.refresh()
    confirmation = controller.request_delete(bookmark_id)
    if confirmation is None:
        abort(404)
    if controller.confirm_delete(confirmation):
        flash("Bookmark deleted.", "success")
    else:
        flash("Could not delete bookmark.", "error")
    return redirect(url_for("web.bookmarks"))


@web_bp.route("/bookmarks/live")
@session_required
def bookmarks_live():
    controller = BookmarkListController(current_client())
    controller.refresh()
    return jsonify({"items": controller.bookmarks})


@web_bp.route("/bookmarks/stream")
@session_required
def bookmarks_stream():
    keepalive = current_app.config["STREAM_KEEPALIVE_SECONDS"]
    client = current_client()
    # Notifications arrive on whichever thread committed the change; they are
    # queued here and handled on the streaming thread.
    events: queue.Queue = queue.Queue()

    def generate():
        controller = BookmarkListController(
            client,
            on_update=lambda items: events.put(("bookmarks", items)),
            dispatch=lambda func: events.put(("call", func)),
        )
        with controller:
            while True:
                try:
                    kind, payload = events.get(timeout=keepalive)
                except queue.Empty:
                    yield ": keep-alive\n\n"
                    continue
                if kind == "call":
                    payload()
                else:
                    yield _sse("bookmarks", {"items": payload})

    return Response(
        stream_with_context(generate()),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
