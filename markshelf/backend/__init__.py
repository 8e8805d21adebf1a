from __future__ import annotations

from dataclasses import dataclass, field

from flask import Flask, current_app

from markshelf.backend.auth import OAuthAuth
from markshelf.backend.feed import ChangeFeed
from markshelf.backend.store import SqlStore

EXTENSION_KEY = "markshelf.backend"


@dataclass
class Backend:
    """The auth, store and change-feed capabilities the app talks to."""

    auth: object
    store: object
    feed: ChangeFeed = field(default_factory=ChangeFeed)


def build_backend(app: Flask) -> Backend:
    feed = ChangeFeed()
    return Backend(auth=OAuthAuth(app), store=SqlStore(feed), feed=feed)


def get_backend(app: Flask | None = None) -> Backend:
    return (app or current_app).extensions[EXTENSION_KEY]
