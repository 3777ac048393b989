from datetime import date

from warehouse.core import messages
from warehouse.core.config import settings
from warehouse.core.errors import NotSupportedError, ValidationError
from warehouse.db.store import DocumentStore
from warehouse.schemas.documents import CategoryRecord
from warehouse.schemas.warehouse import IncomeHeaderOut
from warehouse.services.categories import CategoryAccessor


class IncomeDocument:
    """Header of the "new income" screen.

    Counterparties are the visible employee categories. The screen has no
    line items yet, so there is nothing to post.
    """

    def __init__(self, store: DocumentStore, *, document_date: date | None = None):
        self.categories = CategoryAccessor(store)
        self.document_date = document_date or date.today()
        self.document_number = settings.income_document_number
        self.supplier_id = ""
        self.note = ""

    @property
    def counterparties(self) -> list[CategoryRecord]:
        return self.categories.employee_categories

    def select_supplier(self, supplier_id: str) -> CategoryRecord:
        for category in self.counterparties:
            if category.id == supplier_id:
                self.supplier_id = supplier_id
                return category
        raise ValidationError(messages.SUPPLIER_NOT_EMPLOYEE)

    def header(self) -> IncomeHeaderOut:
        counterparties = self.counterparties
        return IncomeHeaderOut(
            document_date=self.document_date,
            document_number=self.document_number,
            supplier_id=self.supplier_id,
            note=self.note,
            counterparties=counterparties,
            loading=self.categories.loading,
            error=self.categories.error,
        )

    def submit_income(self) -> None:
        # TODO: post income line items (employee -> warehouse, positive amounts) once the screen collects them.
        raise NotSupportedError(messages.INCOME_NOT_SUPPORTED)
