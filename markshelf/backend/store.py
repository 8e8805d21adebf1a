from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from markshelf.backend.feed import (
    ACTION_DELETE,
    ACTION_INSERT,
    ChangeEvent,
    ChangeFeed,
    Subscription,
)
from markshelf.errors import BackendConflict, BackendError, BackendNotFound
from markshelf.extensions import db
from markshelf.models import Bookmark

logger = logging.getLogger(__name__)

ORDER_ASC = "asc"
ORDER_DESC = "desc"


@dataclass(frozen=True)
class Collection:
    name: str
    model: type
    # record key -> model attribute
    fields: dict[str, str]

    def column(self, key: str):
        attribute = self.fields.get(key)
        if attribute is None:
            raise BackendError(f"unknown field {key!r} on {self.name}")
        return getattr(self.model, attribute)


BOOKMARKS = Collection(
    name="bookmarks",
    model=Bookmark,
    fields={
        "id": "id",
        "title": "title",
        "url": "url",
        "owner": "user_id",
        "created_at": "created_at",
    },
)

COLLECTIONS = {BOOKMARKS.name: BOOKMARKS}


class SqlStore:
    """Row store over the Flask-SQLAlchemy session.

    Successful writes commit and then publish a ``ChangeEvent`` on the feed,
    so subscribers only ever hear about committed rows.
    """

    def __init__(self, feed: ChangeFeed, collections: dict | None = None):
        self.feed = feed
        self.collections = collections or COLLECTIONS

    def _collection(self, name: str) -> Collection:
        collection = self.collections.get(name)
        if collection is None:
            raise BackendError(f"unknown collection {name!r}")
        return collection

    def _filtered(self, collection: Collection, filters: dict | None):
        query = collection.model.query
        for key, value in (filters or {}).items():
            query = query.filter(collection.column(key) == value)
        return query

    def query(
        self,
        collection: str,
        filters: dict | None = None,
        order: tuple[str, str] | None = None,
    ) -> list[dict]:
        target = self._collection(collection)
        query = self._filtered(target, filters)
        if order:
            key, direction = order
            column = target.column(key)
            primary = target.column("id")
            if direction == ORDER_DESC:
                query = query.order_by(column.desc(), primary.desc())
            else:
                query = query.order_by(column.asc(), primary.asc())
        try:
            return [row.as_dict() for row in query.all()]
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise BackendError(str(exc)) from exc

    def insert(self, collection: str, record: dict) -> dict:
        target = self._collection(collection)
        for key in record:
            target.column(key)
        values = {target.fields[key]: value for key, value in record.items()}
        row = target.model(**values)
        db.session.add(row)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise BackendConflict(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise BackendError(str(exc)) from exc

        payload = row.as_dict()
        self.feed.publish(ChangeEvent(target.name, ACTION_INSERT, payload))
        return payload

    def delete(self, collection: str, row_id, filters: dict | None = None) -> dict:
        target = self._collection(collection)
        try:
            row = self._filtered(target, filters).filter(
                target.column("id") == row_id
            ).first()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise BackendError(str(exc)) from exc
        if row is None:
            raise BackendNotFound(f"{target.name} row {row_id} not found")

        payload = row.as_dict()
        db.session.delete(row)
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise BackendError(str(exc)) from exc

        self.feed.publish(ChangeEvent(target.name, ACTION_DELETE, payload))
        return payload

    def subscribe(
        self,
        collection: str,
        filters: dict | None,
        on_change: Callable[[ChangeEvent], None],
    ) -> Subscription:
        target = self._collection(collection)
        for key in filters or {}:
            target.column(key)
        return self.feed.subscribe(target.name, filters, on_change)
