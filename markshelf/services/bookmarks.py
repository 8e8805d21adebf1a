from __future__ import annotations

import logging
from typing import Callable

from markshelf.backend.store import ORDER_DESC
from markshelf.errors import (
    BackendConflict,
    BackendError,
    BackendNotFound,
    ConflictError,
    NotFoundError,
    StoreError,
)

logger = logging.getLogger(__name__)

BOOKMARKS = "bookmarks"


class BookmarkStoreClient:
    """Owner-scoped bookmark operations over an injected backend.

    Backend failures are converted to ``ConflictError``/``StoreError`` here so
    callers only ever see the form error taxonomy.
    """

    def __init__(self, backend):
        self.backend = backend

    def current_user(self):
        try:
            return self.backend.auth.current_user()
        except BackendError:
            logger.exception("Current user lookup failed")
            return None

    def sign_out(self) -> None:
        self.backend.auth.sign_out()

    def list_bookmarks(self, owner_id) -> list[dict]:
        try:
            return self.backend.store.query(
                BOOKMARKS, {"owner": owner_id}, ("created_at", ORDER_DESC)
            )
        except BackendError as exc:
            raise StoreError() from exc

    def add_bookmark(self, owner_id, title: str, url: str) -> dict:
        try:
            return self.backend.store.insert(
                BOOKMARKS, {"title": title, "url": url, "owner": owner_id}
            )
        except BackendConflict as exc:
            raise ConflictError("Bookmark already exists") from exc
        except BackendError as exc:
            raise StoreError() from exc

    def delete_bookmark(self, owner_id, bookmark_id) -> None:
        try:
            self.backend.store.delete(BOOKMARKS, bookmark_id, {"owner": owner_id})
        except BackendNotFound as exc:
            raise NotFoundError() from exc
        except BackendError as exc:
            raise StoreError() from exc

    def subscribe(self, owner_id, on_change: Callable):
        return self.backend.store.subscribe(BOOKMARKS, {"owner": owner_id}, on_change)
