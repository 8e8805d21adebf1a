from __future__ import annotations

import logging

from authlib.integrations.flask_client import OAuth, OAuthError
from flask import Flask
from flask_login import current_user, login_user, logout_user

from markshelf.errors import BackendError
from markshelf.extensions import db
from markshelf.models import User

logger = logging.getLogger(__name__)

PROVIDER_SETTINGS = {
    "google": {
        "label": "Google",
        "server_metadata_url": (
            "https://accounts.google.com/.well-known/openid-configuration"
        ),
        "client_kwargs": {"scope": "openid email profile"},
    },
}


class OAuthAuth:
    """Session auth: OAuth sign-in through Authlib, sessions through Flask-Login."""

    def __init__(self, app: Flask | None = None):
        self.oauth = OAuth()
        self.providers: dict[str, str] = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        self.oauth.init_app(app)
        for name in app.config.get("OAUTH_PROVIDERS", []):
            settings = PROVIDER_SETTINGS.get(name)
            if settings is None:
                logger.warning("Ignoring unsupported OAuth provider %r", name)
                continue
            prefix = name.upper()
            self.oauth.register(
                name=name,
                server_metadata_url=settings["server_metadata_url"],
                client_id=app.config.get(f"{prefix}_CLIENT_ID", ""),
                client_secret=app.config.get(f"{prefix}_CLIENT_SECRET", ""),
                client_kwargs=settings["client_kwargs"],
            )
            self.providers[name] = settings["label"]

    def _client(self, provider: str):
        if provider not in self.providers:
            raise BackendError(f"unknown sign-in provider {provider!r}")
        return self.oauth.create_client(provider)

    def sign_in(self, provider: str, redirect_uri: str):
        return self._client(provider).authorize_redirect(redirect_uri)

    def complete_sign_in(self, provider: str) -> User:
        client = self._client(provider)
        try:
            token = client.authorize_access_token()
        except OAuthError as exc:
            raise BackendError(f"token exchange failed: {exc.error}") from exc

        userinfo = token.get("userinfo")
        if not userinfo:
            try:
                userinfo = client.userinfo(token=token)
            except OAuthError as exc:
                raise BackendError(f"userinfo lookup failed: {exc.error}") from exc

        subject = str((userinfo or {}).get("sub") or "").strip()
        if not subject:
            raise BackendError("provider returned no subject")

        user = User.query.filter_by(provider=provider, subject=subject).first()
        if not user:
            user = User(provider=provider, subject=subject)
            db.session.add(user)
        user.email = userinfo.get("email") or user.email
        user.name = userinfo.get("name") or user.name
        db.session.commit()

        login_user(user)
        logger.info("Signed in user %s via %s", user.id, provider)
        return user

    def sign_out(self) -> None:
        logout_user()

    def current_user(self) -> User | None:
        if current_user.is_authenticated:
            return current_user._get_current_object()
        return None
