import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from warehouse.core.errors import NotFoundError, StoreError
from warehouse.models.documents import Category, Product, Transaction

logger = logging.getLogger(__name__)


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# Placeholder replaced with the store clock when a document is written.
SERVER_TIMESTAMP = _ServerTimestamp()


# collection -> (model, {document field: column attribute}, ordering columns)
_COLLECTIONS: dict[str, tuple[type, dict[str, str], tuple[str, ...]]] = {
    "products": (
        Product,
        {
            "id": "id",
            "name": "name",
            "unit": "unit",
            "category": "category",
            "quantity": "quantity",
            "averagePurchasePrice": "average_purchase_price",
            "image": "image",
            "barcode": "barcode",
        },
        ("created_at", "id"),
    ),
    "categories": (
        Category,
        {
            "id": "id",
            "title": "title",
            "row": "row",
            "isVisible": "is_visible",
        },
        ("created_at", "id"),
    ),
    "transactions": (
        Transaction,
        {
            "id": "id",
            "categoryId": "category_id",
            "fromUser": "from_user",
            "toUser": "to_user",
            "amount": "amount",
            "description": "description",
            "type": "type",
            "date": "date",
            "isWarehouseOperation": "is_warehouse_operation",
        },
        ("date", "id"),
    ),
}


class DocumentStore:
    """Document-style access to the warehouse collections.

    Documents are plain dicts keyed by the camelCase field names the
    front-end uses. Each write is committed on its own unless it runs inside
    ``batch()``; there is no atomicity across separate writes.
    """

    def __init__(self, session: Session):
        self.session = session
        self._batch_depth = 0

    def _collection(self, name: str) -> tuple[type, dict[str, str], tuple[str, ...]]:
        try:
            return _COLLECTIONS[name]
        except KeyError:
            raise StoreError(f"Unknown collection: {name}") from None

    def _to_document(self, row: Any, fields: dict[str, str]) -> dict[str, Any]:
        return {field: getattr(row, attr) for field, attr in fields.items()}

    def _to_columns(self, collection: str, fields: dict[str, str], data: dict[str, Any]) -> dict[str, Any]:
        columns: dict[str, Any] = {}
        for key, value in data.items():
            if key not in fields:
                raise StoreError(f"Unknown field '{key}' for collection {collection}")
            if value is SERVER_TIMESTAMP:
                value = datetime.utcnow()
            columns[fields[key]] = value
        return columns

    def _commit(self) -> None:
        if self._batch_depth:
            return
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(str(exc)) from exc

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        model, fields, _ = self._collection(collection)
        try:
            row = self.session.get(model, doc_id, populate_existing=True)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(str(exc)) from exc
        if row is None:
            return None
        return self._to_document(row, fields)

    def list_documents(self, collection: str) -> list[dict[str, Any]]:
        model, fields, ordering = self._collection(collection)
        query = select(model).order_by(*(getattr(model, column).asc() for column in ordering))
        try:
            rows = self.session.scalars(query).all()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(str(exc)) from exc
        return [self._to_document(row, fields) for row in rows]

    def add(self, collection: str, data: dict[str, Any]) -> str:
        model, fields, _ = self._collection(collection)
        payload = dict(data)
        doc_id = str(payload.pop("id", None) or uuid.uuid4().hex)
        row = model(id=doc_id, **self._to_columns(collection, fields, payload))
        try:
            self.session.add(row)
            self.session.flush()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(str(exc)) from exc
        self._commit()
        logger.debug("store add %s/%s", collection, doc_id)
        return doc_id

    def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        model, fields, _ = self._collection(collection)
        if "id" in data:
            raise StoreError("Document id cannot be updated")
        columns = self._to_columns(collection, fields, data)
        try:
            row = self.session.get(model, doc_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(str(exc)) from exc
        if row is None:
            raise NotFoundError(f"No document {collection}/{doc_id}")
        for attr, value in columns.items():
            setattr(row, attr, value)
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(str(exc)) from exc
        self._commit()
        logger.debug("store update %s/%s %s", collection, doc_id, sorted(data))

    def delete(self, collection: str, doc_id: str) -> None:
        model, _, _ = self._collection(collection)
        try:
            row = self.session.get(model, doc_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(str(exc)) from exc
        if row is None:
            raise NotFoundError(f"No document {collection}/{doc_id}")
        try:
            self.session.delete(row)
            self.session.flush()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(str(exc)) from exc
        self._commit()
        logger.debug("store delete %s/%s", collection, doc_id)

    @contextmanager
    def batch(self) -> Iterator["DocumentStore"]:
        """Group writes so they are committed together, or not at all."""
        self._batch_depth += 1
        try:
            yield self
        except BaseException:
            self._batch_depth -= 1
            if not self._batch_depth:
                self.session.rollback()
            raise
        self._batch_depth -= 1
        self._commit()
