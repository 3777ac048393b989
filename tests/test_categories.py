import pytest

from warehouse.core import messages
from warehouse.core.errors import NotFoundError
from warehouse.schemas.documents import CategoryRecord
from warehouse.services.categories import CategoryAccessor, get_category, split_categories


def make_category(id, row, is_visible=True):
    return CategoryRecord(id=id, title=id.upper(), row=row, is_visible=is_visible)


def test_split_categories_preserves_source_order():
    categories = [
        make_category("p1", 1),
        make_category("e1", 2),
        make_category("hidden", 2, is_visible=False),
        make_category("p2", 4),
        make_category("e2", 2, is_visible=None),
    ]
    employees, projects = split_categories(categories, employee_row=2)
    assert [c.id for c in employees] == ["e1", "e2"]
    assert [c.id for c in projects] == ["p1", "hidden", "p2"]


def test_accessor_filters_employees_and_projects(store):
    accessor = CategoryAccessor(store)
    assert [c.id for c in accessor.employee_categories] == ["cat-02", "cat-05"]
    assert [c.id for c in accessor.project_categories] == ["cat-01", "cat-03", "cat-04"]
    assert accessor.loading is False
    assert accessor.error is None


def test_accessor_fetches_once_per_instance(store):
    accessor = CategoryAccessor(store)
    accessor.list_categories()
    accessor.employee_categories
    accessor.project_categories
    assert store.calls.count(("list", "categories")) == 1

    CategoryAccessor(store).list_categories()
    assert store.calls.count(("list", "categories")) == 2


def test_accessor_failure_clears_loading_and_sets_error(make_store):
    store = make_store(fail_on={("list", "categories"): 1})
    accessor = CategoryAccessor(store)
    assert accessor.list_categories() == []
    assert accessor.loading is False
    assert accessor.error == messages.CATEGORIES_LOAD_FAILED


def test_get_category_missing(store):
    with pytest.raises(NotFoundError) as excinfo:
        get_category(store, "nope")
    assert excinfo.value.message == messages.PROJECT_NOT_FOUND
