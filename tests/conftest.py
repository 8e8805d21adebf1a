from itertools import count
from types import SimpleNamespace

import pytest

from markshelf import create_app
from markshelf.config import TestConfig
from markshelf.errors import ConflictError, NotFoundError, StoreError
from markshelf.extensions import db


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.drop_all()
        db.create_all()
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


class FakeSubscription:
    def __init__(self, owner_id, callback):
        self.owner_id = owner_id
        self.callback = callback
        self.close_calls = 0

    @property
    def closed(self):
        return self.close_calls > 0

    def close(self):
        self.close_calls += 1


class FakeBookmarkClient:
    """In-memory stand-in for BookmarkStoreClient."""

    def __init__(self, user_id=1):
        self.user = SimpleNamespace(id=user_id) if user_id is not None else None
        self.rows: list[dict] = []
        self.ids = count(1)
        self.clock = count(1)
        self.insert_calls = 0
        self.query_calls = 0
        self.fail_queries = False
        self.fail_inserts = None
        self.subscriptions: list[FakeSubscription] = []
        self.sign_out_calls = 0

    def current_user(self):
        return self.user

    def sign_out(self):
        self.sign_out_calls += 1

    def list_bookmarks(self, owner_id):
        self.query_calls += 1
        if self.fail_queries:
            raise StoreError()
        rows = [row for row in self.rows if row["owner"] == owner_id]
        return sorted(
            rows, key=lambda row: (row["created_at"], row["id"]), reverse=True
        )

    def add_bookmark(self, owner_id, title, url):
        self.insert_calls += 1
        if self.fail_inserts is not None:
            raise self.fail_inserts
        if any(row["owner"] == owner_id and row["url"] == url for row in self.rows):
            raise ConflictError("Bookmark already exists")
        row = {
            "id": next(self.ids),
            "title": title,
            "url": url,
            "owner": owner_id,
            "created_at": next(self.clock),
        }
        self.rows.append(row)
        self.notify()
        return dict(row)

    def delete_bookmark(self, owner_id, bookmark_id):
        for row in self.rows:
            if row["id"] == bookmark_id and row["owner"] == owner_id:
                self.rows.remove(row)
                self.notify()
                return
        raise NotFoundError()

    def subscribe(self, owner_id, on_change):
        subscription = FakeSubscription(owner_id, on_change)
        self.subscriptions.append(subscription)
        return subscription

    def notify(self):
        for subscription in list(self.subscriptions):
            if not subscription.closed:
                subscription.callback({"collection": "bookmarks"})


@pytest.fixture
def fake_client():
    return FakeBookmarkClient()
