from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Callable

from markshelf.errors import StoreError

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this bookmark?"


@dataclass(frozen=True)
class DeleteConfirmation:
    bookmark_id: int
    title: str
    prompt: str = DELETE_PROMPT


def _call_inline(func: Callable[[], object]) -> None:
    func()


class BookmarkListController:
    """Owns the displayed bookmark list for one mounted view.

    The list is a disposable copy of the store's rows: every refresh replaces
    it wholesale, and any change notification simply triggers another
    refresh. ``dispatch`` decides where notification-driven refreshes run;
    callers with their own event loop pass a function that enqueues onto it.
    """

    def __init__(
        self,
        client,
        on_update: Callable[[list[dict]], None] | None = None,
        dispatch: Callable[[Callable[[], object]], None] | None = None,
    ):
        self.client = client
        self.on_update = on_update
        self.dispatch = dispatch or _call_inline
        self.bookmarks: list[dict] = []
        self.loading = False
        self.mounted = False
        self.torn_down = False
        self.subscription = None
        self.pending_delete: DeleteConfirmation | None = None
        self.last_error: StoreError | None = None

    def __enter__(self):
        return self.mount()

    def __exit__(self, exc_type, exc, tb):
        self.unmount()

    def mount(self):
        if self.mounted or self.torn_down:
            raise RuntimeError("list controller can only be mounted once")
        self.mounted = True

        with ExitStack() as stack:
            stack.callback(self.unmount)
            self.refresh()
            user = self.client.current_user()
            if user is not None:
                self.subscription = self.client.subscribe(user.id, self._on_change)
            stack.pop_all()
        return self

    def unmount(self) -> None:
        if self.torn_down:
            return
        self.torn_down = True
        self.mounted = False
        subscription, self.subscription = self.subscription, None
        if subscription is not None:
            subscription.close()

    def _on_change(self, event) -> None:
        if self.torn_down:
            return
        self.dispatch(self.refresh)

    def refresh(self) -> bool:
        """Reload the list from the store. Returns True when the result was applied."""
        if self.torn_down:
            return False

        self.loading = True
        try:
            user = self.client.current_user()
            rows = self.client.list_bookmarks(user.id) if user is not None else []
        except StoreError as exc:
            logger.warning("Bookmark refresh failed: %r", exc.__cause__ or exc)
            return False
        finally:
            self.loading = False

        if self.torn_down:
            logger.debug("Discarding refresh result for unmounted list")
            return False

        self.bookmarks = list(rows)
        if self.on_update is not None:
            self.on_update(self.bookmarks)
        return True

    def delete(self, bookmark_id) -> bool:
        self.last_error = None
        user = self.client.current_user()
        if user is None:
            logger.warning("Delete of bookmark %s without a session", bookmark_id)
            return False

        try:
            self.client.delete_bookmark(user.id, bookmark_id)
        except StoreError as exc:
            self.last_error = exc
            logger.warning(
                "Delete of bookmark %s failed: %r", bookmark_id, exc.__cause__ or exc
            )
            return False

        self.refresh()
        return True

    def request_delete(self, bookmark_id) -> DeleteConfirmation | None:
        for bookmark in self.bookmarks:
            if bookmark["id"] == bookmark_id:
                self.pending_delete = DeleteConfirmation(
                    bookmark_id=bookmark_id, title=bookmark["title"]
                )
                return self.pending_delete
        return None

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self, confirmation: DeleteConfirmation | None = None) -> bool:
        pending = self.pending_delete
        if pending is None:
            return False
        if confirmation is not None and confirmation.bookmark_id != pending.bookmark_id:
            return False
        self.pending_delete = None
        return self.delete(pending.bookmark_id)
