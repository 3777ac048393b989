import logging

from warehouse.core import messages
from warehouse.core.config import settings
from warehouse.core.errors import NotFoundError, StoreError
from warehouse.db.store import DocumentStore
from warehouse.schemas.documents import CategoryRecord, parse_record

logger = logging.getLogger(__name__)


def is_employee_category(category: CategoryRecord, employee_row: int | None = None) -> bool:
    row = settings.employee_category_row if employee_row is None else employee_row
    return category.row == row and category.is_visible is not False


def split_categories(
    categories: list[CategoryRecord],
    employee_row: int | None = None,
) -> tuple[list[CategoryRecord], list[CategoryRecord]]:
    """Return (employees, projects), both in source order."""
    employees: list[CategoryRecord] = []
    projects: list[CategoryRecord] = []
    for category in categories:
        if is_employee_category(category, employee_row):
            employees.append(category)
        else:
            projects.append(category)
    return employees, projects


def get_category(store: DocumentStore, category_id: str) -> CategoryRecord:
    document = store.get("categories", category_id)
    if document is None:
        raise NotFoundError(messages.PROJECT_NOT_FOUND)
    return parse_record(CategoryRecord, document)


class CategoryAccessor:
    """Loads the categories collection once per instance.

    Failures leave ``loading`` cleared, ``error`` set and an empty list; the
    accessor never retries.
    """

    def __init__(self, store: DocumentStore, employee_row: int | None = None):
        self.store = store
        self.employee_row = employee_row
        self.loading = False
        self.error: str | None = None
        self._categories: list[CategoryRecord] | None = None

    def list_categories(self) -> list[CategoryRecord]:
        if self._categories is not None:
            return self._categories
        self.loading = True
        try:
            self._categories = [
                parse_record(CategoryRecord, document)
                for document in self.store.list_documents("categories")
            ]
        except StoreError:
            logger.exception("Error loading categories")
            self.error = messages.CATEGORIES_LOAD_FAILED
            self._categories = []
        finally:
            self.loading = False
        return self._categories

    @property
    def categories(self) -> list[CategoryRecord]:
        return self.list_categories()

    @property
    def employee_categories(self) -> list[CategoryRecord]:
        employees, _ = split_categories(self.list_categories(), self.employee_row)
        return employees

    @property
    def project_categories(self) -> list[CategoryRecord]:
        _, projects = split_categories(self.list_categories(), self.employee_row)
        return projects
