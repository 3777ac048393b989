from decimal import Decimal

import pytest

from warehouse.core import messages
from warehouse.core.errors import NotFoundError, StoreError, ValidationError
from warehouse.db.store import DocumentStore
from warehouse.schemas.warehouse import ExpenseLineItem
from warehouse.services.expense import ExpenseDocument, calculate_totals, submit_expense
from warehouse.services.navigation import NavigationMessage
from warehouse.services.product_details import get_product


def line(store, product_id, quantity):
    return ExpenseLineItem(product=get_product(store, product_id), quantity=quantity)


def transactions(session):
    return DocumentStore(session).list_documents("transactions")


def test_submit_expense_posts_one_transaction_per_line(store, seeded):
    items = [line(store, "prod-a", 2), line(store, "prod-b", 1)]
    store.calls.clear()

    posted = submit_expense(store, "cat-01", items)

    assert len(posted) == 2
    records = transactions(seeded)
    assert sorted(record["amount"] for record in records) == [Decimal("-200"), Decimal("-50")]
    for record in records:
        assert record["type"] == "expense"
        assert record["isWarehouseOperation"] is True
        assert record["categoryId"] == "cat-01"
        assert record["fromUser"] == "Склад"
        assert record["toUser"] == "Жилой комплекс"
        assert record["date"] is not None
    descriptions = {record["description"] for record in records}
    assert "Списание со склада: Цемент (2 мешок)" in descriptions
    assert "Списание со склада: Кабель (1 м)" in descriptions

    assert get_product(store, "prod-a").quantity == 8
    assert get_product(store, "prod-b").quantity == 4
    assert store.calls[:5] == [
        ("get", "categories"),
        ("add", "transactions"),
        ("update", "products"),
        ("add", "transactions"),
        ("update", "products"),
    ]


@pytest.mark.parametrize(
    ("project_id", "with_items", "message"),
    [
        ("", True, messages.SELECT_PROJECT),
        ("   ", True, messages.SELECT_PROJECT),
        ("cat-01", False, messages.ADD_PRODUCTS),
    ],
)
def test_submit_expense_rejects_before_store_calls(store, project_id, with_items, message):
    items = [line(store, "prod-a", 1)] if with_items else []
    store.calls.clear()
    with pytest.raises(ValidationError) as excinfo:
        submit_expense(store, project_id, items)
    assert excinfo.value.message == message
    assert store.calls == []


def test_submit_expense_rejects_non_positive_quantity(store):
    items = [line(store, "prod-a", 0)]
    store.calls.clear()
    with pytest.raises(ValidationError):
        submit_expense(store, "cat-01", items)
    assert store.writes == []


def test_submit_expense_never_drives_quantity_negative(store):
    items = [line(store, "prod-b", 3), line(store, "prod-b", 3)]
    store.calls.clear()
    with pytest.raises(ValidationError) as excinfo:
        submit_expense(store, "cat-01", items)
    assert "Кабель" in excinfo.value.message
    assert store.writes == []


def test_repeated_product_lines_chain_quantities(store):
    items = [line(store, "prod-a", 2), line(store, "prod-a", 3)]
    submit_expense(store, "cat-01", items)
    assert get_product(store, "prod-a").quantity == 5


def test_missing_project_aborts_without_writes(store):
    items = [line(store, "prod-a", 1)]
    with pytest.raises(NotFoundError) as excinfo:
        submit_expense(store, "ghost", items)
    assert excinfo.value.message == messages.PROJECT_NOT_FOUND
    assert store.writes == []


def test_failure_mid_sequence_keeps_earlier_lines(make_store, seeded):
    store = make_store(fail_on={("update", "products"): 2})
    items = [line(store, "prod-a", 2), line(store, "prod-b", 1)]

    with pytest.raises(StoreError):
        submit_expense(store, "cat-01", items)

    records = transactions(seeded)
    assert [record["amount"] for record in records] == [Decimal("-200")]
    assert get_product(store, "prod-a").quantity == 8
    assert get_product(store, "prod-b").quantity == 5


def test_zero_price_posts_zero_amount(store, seeded):
    store.update("products", "prod-c", {"quantity": 4})
    submit_expense(store, "cat-01", [line(store, "prod-c", 1)])
    assert transactions(seeded)[0]["amount"] == 0


def test_calculate_totals(store):
    items = [line(store, "prod-a", 2), line(store, "prod-b", 1)]
    totals = calculate_totals(items)
    assert totals.quantity == 3
    assert totals.amount == Decimal("250")
    assert totals.total == totals.amount


def test_document_submit_success(store):
    document = ExpenseDocument(store)
    document.selected_project = "cat-01"
    document.add_item(get_product(store, "prod-a"), 2)
    document.add_item(get_product(store, "prod-b"), 1)
    assert document.can_submit

    outcome = document.submit()

    assert outcome.ok
    assert outcome.notice.kind == "success"
    assert outcome.notice.message == messages.EXPENSE_POSTED
    assert outcome.redirect_to == "/warehouse"
    assert document.items == []
    assert document.loading is False


def test_document_without_project_never_loads(store):
    document = ExpenseDocument(store)
    document.add_item(get_product(store, "prod-a"), 1)
    store.calls.clear()

    outcome = document.submit()

    assert not outcome.ok
    assert outcome.notice.message == messages.SELECT_PROJECT
    assert outcome.failure == "validation"
    assert document.loading is False
    assert store.calls == []
    assert not document.can_submit


def test_document_store_failure_shows_generic_notice(make_store):
    store = make_store(fail_on={("add", "transactions"): 1})
    document = ExpenseDocument(store)
    document.selected_project = "cat-01"
    document.add_item(get_product(store, "prod-a"), 1)

    outcome = document.submit()

    assert not outcome.ok
    assert outcome.notice.message == messages.EXPENSE_FAILED
    assert outcome.failure == "store"
    assert document.loading is False
    assert len(document.items) == 1


def test_navigation_message_is_applied_once(store):
    item = line(store, "prod-a", 1)
    message = NavigationMessage(added_item=item, selected_project="cat-01")
    document = ExpenseDocument(store, message)

    assert document.selected_project == "cat-01"
    assert len(document.items) == 1
    assert document.apply(message) is False
    assert len(document.items) == 1


def test_document_defaults(store):
    document = ExpenseDocument(store)
    assert document.document_number == "000003"
    assert document.add_products() == ("/warehouse/products", "expense")
