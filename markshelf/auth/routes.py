from flask import current_app, flash, redirect, render_template, url_for

from markshelf.auth import auth_bp
from markshelf.backend import get_backend
from markshelf.controllers.session_gate import SessionGate, current_client, sign_out
from markshelf.errors import BackendError


@auth_bp.route("/login")
def login():
    if SessionGate(current_client()).check() is not None:
        return redirect(url_for("web.bookmarks"))

    providers = get_backend().auth.providers
    return render_template("login.html", providers=providers)


@auth_bp.route("/login/<provider>", methods=["POST"])
def login_start(provider: str):
    redirect_uri = current_app.config.get("OAUTH_REDIRECT_URI") or url_for(
        "auth.callback", provider=provider, _external=True
    )
    try:
        return get_backend().auth.sign_in(provider, redirect_uri)
    except BackendError as exc:
        current_app.logger.warning("Sign-in could not start: %s", exc)
        flash("Sign-in failed.", "error")
        return redirect(url_for("auth.login"))


@auth_bp.route("/auth/callback/<provider>")
def callback(provider: str):
    try:
        get_backend().auth.complete_sign_in(provider)
    except BackendError as exc:
        current_app.logger.warning("Sign-in via %s failed: %s", provider, exc)
        flash("Sign-in failed.", "error")
        return redirect(url_for("auth.login"))
    return redirect(url_for("web.bookmarks"))


@auth_bp.route("/logout", methods=["POST"])
def logout():
    return sign_out(current_client())
