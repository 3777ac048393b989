import os
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from warehouse.api.deps import get_store
from warehouse.core.errors import StoreError
from warehouse.db.database import Base
from warehouse.db.store import DocumentStore
from warehouse.main import app
from warehouse.models import Category, Product


class RecordingStore(DocumentStore):
    """Store that logs every call and can fail the n-th call of a kind."""

    def __init__(self, session, fail_on=None):
        super().__init__(session)
        self.calls: list[tuple[str, str]] = []
        self.fail_on = dict(fail_on or {})

    def _record(self, operation, collection):
        key = (operation, collection)
        self.calls.append(key)
        if self.fail_on.get(key) == self.calls.count(key):
            raise StoreError(f"injected {operation} failure on {collection}")

    @property
    def writes(self):
        return [call for call in self.calls if call[0] in {"add", "update", "delete"}]

    def get(self, collection, doc_id):
        self._record("get", collection)
        return super().get(collection, doc_id)

    def list_documents(self, collection):
        self._record("list", collection)
        return super().list_documents(collection)

    def add(self, collection, data):
        self._record("add", collection)
        return super().add(collection, data)

    def update(self, collection, doc_id, data):
        self._record("update", collection)
        return super().update(collection, doc_id, data)

    def delete(self, collection, doc_id):
        self._record("delete", collection)
        return super().delete(collection, doc_id)


@pytest.fixture()
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    db = factory()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture()
def seeded(session):
    session.add_all(
        [
            Category(id="cat-01", title="Жилой комплекс", row=1, is_visible=True),
            Category(id="cat-02", title="Иванов", row=2, is_visible=True),
            Category(id="cat-03", title="Петров", row=2, is_visible=False),
            Category(id="cat-04", title="Офис", row=3, is_visible=None),
            Category(id="cat-05", title="Сидоров", row=2, is_visible=None),
            Product(
                id="prod-a",
                name="Цемент",
                unit="мешок",
                category="Стройматериалы",
                quantity=10,
                average_purchase_price=Decimal("100"),
            ),
            Product(
                id="prod-b",
                name="Кабель",
                unit="м",
                category="Электрика",
                quantity=5,
                average_purchase_price=Decimal("50"),
            ),
            Product(id="prod-c", name="Анкер", unit="шт", quantity=0, average_purchase_price=None),
        ]
    )
    session.commit()
    return session


@pytest.fixture()
def store(seeded):
    return RecordingStore(seeded)


@pytest.fixture()
def make_store(seeded):
    def factory(fail_on=None):
        return RecordingStore(seeded, fail_on=fail_on)

    return factory


@pytest.fixture()
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
