import logging
from datetime import date
from decimal import Decimal

from warehouse.core import messages
from warehouse.core.config import settings
from warehouse.core.errors import NotFoundError, StoreError, ValidationError
from warehouse.db.store import SERVER_TIMESTAMP, DocumentStore
from warehouse.schemas.documents import ProductRecord, TransactionRecord
from warehouse.schemas.warehouse import ExpenseLineItem, ExpenseTotals, Notice, SubmitOutcome
from warehouse.services.categories import get_category
from warehouse.services.navigation import PRODUCT_LIST, WAREHOUSE_ROOT, NavigationMessage

logger = logging.getLogger(__name__)


def calculate_totals(items: list[ExpenseLineItem]) -> ExpenseTotals:
    quantity = sum(item.quantity for item in items)
    amount = sum((item.amount for item in items), Decimal("0"))
    return ExpenseTotals(quantity=quantity, amount=amount, total=amount)


def validate_expense(project_id: str | None, line_items: list[ExpenseLineItem]) -> None:
    if not project_id or not project_id.strip():
        raise ValidationError(messages.SELECT_PROJECT)
    if not line_items:
        raise ValidationError(messages.ADD_PRODUCTS)

    requested: dict[str, int] = {}
    for item in line_items:
        if item.quantity <= 0:
            raise ValidationError(messages.INVALID_QUANTITY)
        requested[item.product.id] = requested.get(item.product.id, 0) + item.quantity
    for item in line_items:
        if requested[item.product.id] > item.product.quantity:
            raise ValidationError(messages.INSUFFICIENT_STOCK.format(name=item.product.name))


def _expense_description(product: ProductRecord, quantity: int) -> str:
    return messages.EXPENSE_DESCRIPTION.format(name=product.name, quantity=quantity, unit=product.unit)


def submit_expense(
    store: DocumentStore,
    project_id: str,
    line_items: list[ExpenseLineItem],
    *,
    warehouse_label: str | None = None,
) -> list[str]:
    """Post every line item against a project and return the transaction ids.

    Line items are posted one after another. Each item's transaction insert
    and quantity update are committed together, but items posted before a
    failure stay posted.
    """
    validate_expense(project_id, line_items)
    project = get_category(store, project_id)
    from_user = warehouse_label or settings.warehouse_label

    # Last-known quantities, so repeated lines for one product chain correctly.
    known_quantity: dict[str, int] = {}
    posted: list[str] = []
    try:
        for item in line_items:
            product = item.product
            current = known_quantity.get(product.id, product.quantity)
            record = TransactionRecord(
                category_id=project_id,
                from_user=from_user,
                to_user=project.title,
                amount=-item.amount,
                description=_expense_description(product, item.quantity),
                type="expense",
                is_warehouse_operation=True,
            )
            with store.batch():
                transaction_id = store.add("transactions", {**record.to_document(), "date": SERVER_TIMESTAMP})
                try:
                    store.update("products", product.id, {"quantity": current - item.quantity})
                except NotFoundError as exc:
                    raise NotFoundError(messages.PRODUCT_NOT_FOUND) from exc
            known_quantity[product.id] = current - item.quantity
            posted.append(transaction_id)
    except (NotFoundError, StoreError):
        if posted:
            logger.error(
                "Expense posting for project %s stopped after %d of %d line items; posted items are kept",
                project_id,
                len(posted),
                len(line_items),
            )
        raise

    logger.info("Posted %d expense line items to project %s", len(posted), project_id)
    return posted


class ExpenseDocument:
    """State of the "new expense" screen."""

    def __init__(
        self,
        store: DocumentStore,
        message: NavigationMessage | None = None,
        *,
        document_date: date | None = None,
    ):
        self.store = store
        self.document_date = document_date or date.today()
        self.document_number = settings.expense_document_number
        self.selected_project = ""
        self.note = ""
        self.items: list[ExpenseLineItem] = []
        self.loading = False
        if message is not None:
            self.apply(message)

    def apply(self, message: NavigationMessage) -> bool:
        payload = message.consume()
        if payload is None:
            return False
        if payload.selected_project:
            self.selected_project = payload.selected_project
        if payload.added_item is not None:
            self.items.append(payload.added_item)
        return True

    def add_item(self, product: ProductRecord, quantity: int) -> ExpenseLineItem:
        item = ExpenseLineItem(product=product, quantity=quantity)
        self.items.append(item)
        return item

    def add_products(self) -> tuple[str, str]:
        return PRODUCT_LIST, "expense"

    @property
    def totals(self) -> ExpenseTotals:
        return calculate_totals(self.items)

    @property
    def can_submit(self) -> bool:
        return not self.loading and bool(self.selected_project) and bool(self.items)

    def submit(self) -> SubmitOutcome:
        try:
            validate_expense(self.selected_project, self.items)
        except ValidationError as exc:
            return SubmitOutcome(ok=False, notice=Notice(kind="error", message=exc.message), failure="validation")

        self.loading = True
        try:
            submit_expense(self.store, self.selected_project, self.items)
        except NotFoundError as exc:
            logger.exception("Error submitting expense")
            return SubmitOutcome(ok=False, notice=Notice(kind="error", message=exc.message), failure="not_found")
        except StoreError:
            logger.exception("Error submitting expense")
            return SubmitOutcome(
                ok=False,
                notice=Notice(kind="error", message=messages.EXPENSE_FAILED),
                failure="store",
            )
        finally:
            self.loading = False

        self.items = []
        return SubmitOutcome(
            ok=True,
            notice=Notice(kind="success", message=messages.EXPENSE_POSTED),
            redirect_to=WAREHOUSE_ROOT,
        )
