from __future__ import annotations

import logging
from typing import Callable

from markshelf.errors import (
    AuthError,
    FormError,
    InvalidURL,
    StoreError,
    ValidationError,
)
from markshelf.services.urls import normalize_url

logger = logging.getLogger(__name__)


class AddBookmarkForm:
    """State and submit logic behind the "add bookmark" form."""

    def __init__(self, client, on_added: Callable[[], None] | None = None):
        self.client = client
        self.on_added = on_added
        self.title = ""
        self.url = ""
        self.loading = False
        self.error_message = ""

    def reset(self) -> None:
        self.title = ""
        self.url = ""
        self.loading = False
        self.error_message = ""

    def submit(self, title: str | None = None, url: str | None = None) -> dict:
        if title is not None:
            self.title = title
        if url is not None:
            self.url = url
        self.error_message = ""

        try:
            created = self._submit()
        except FormError as exc:
            self.error_message = exc.message
            raise

        self.reset()
        if self.on_added is not None:
            self.on_added()
        return created

    def _submit(self) -> dict:
        title = (self.title or "").strip()
        raw_url = (self.url or "").strip()
        if not title or not raw_url:
            raise ValidationError("Title and URL are required")

        try:
            url = normalize_url(raw_url)
        except InvalidURL as exc:
            raise ValidationError("Invalid URL") from exc

        self.loading = True
        try:
            user = self.client.current_user()
            if user is None:
                raise AuthError("User not authenticated")
            try:
                return self.client.add_bookmark(user.id, title, url)
            except StoreError as exc:
                logger.warning(
                    "Bookmark insert failed for user %s: %r", user.id, exc.__cause__
                )
                raise
        finally:
            self.loading = False
