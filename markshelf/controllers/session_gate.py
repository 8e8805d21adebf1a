from __future__ import annotations

import logging
from functools import wraps

from flask import g, redirect, url_for

from markshelf.backend import get_backend
from markshelf.services.bookmarks import BookmarkStoreClient

logger = logging.getLogger(__name__)

SIGN_IN_ENDPOINT = "auth.login"


class SessionGate:
    def __init__(self, client: BookmarkStoreClient):
        self.client = client

    def check(self):
        return self.client.current_user()


def current_client() -> BookmarkStoreClient:
    return BookmarkStoreClient(get_backend())


def session_required(func):
    """Only run the view for a signed-in user; everyone else goes to sign-in.

    The session is checked again on every request, so a sign-out from another
    tab takes effect on the next page load.
    """

    @wraps(func)
    def wrapped(*args, **kwargs):
        user = SessionGate(current_client()).check()
        if user is None:
            return redirect(url_for(SIGN_IN_ENDPOINT))
        g.user = user
        return func(*args, **kwargs)

    return wrapped


def sign_out(client: BookmarkStoreClient):
    try:
        client.sign_out()
    except Exception:
        logger.exception("Sign-out failed")
    return redirect(url_for(SIGN_IN_ENDPOINT))
