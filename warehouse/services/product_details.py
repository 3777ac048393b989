import logging
from enum import Enum

from warehouse.core import messages
from warehouse.core.config import settings
from warehouse.core.errors import ConfirmationRequiredError, NotFoundError, StoreError, ValidationError
from warehouse.db.store import DocumentStore
from warehouse.schemas.documents import ProductRecord, parse_record
from warehouse.schemas.warehouse import Notice, ProductDetailOut, SubmitOutcome
from warehouse.services.navigation import PRODUCT_LIST

logger = logging.getLogger(__name__)


def get_product(store: DocumentStore, product_id: str) -> ProductRecord:
    document = store.get("products", product_id)
    if document is None:
        raise NotFoundError(messages.PRODUCT_NOT_FOUND)
    return parse_record(ProductRecord, document)


def list_products(store: DocumentStore) -> list[ProductRecord]:
    products = [parse_record(ProductRecord, document) for document in store.list_documents("products")]
    return sorted(products, key=lambda product: product.name.lower())


def set_product_quantity(store: DocumentStore, product_id: str, quantity: int) -> None:
    if quantity < 0:
        raise ValidationError("Quantity cannot be negative")
    try:
        store.update("products", product_id, {"quantity": quantity})
    except NotFoundError as exc:
        raise NotFoundError(messages.PRODUCT_NOT_FOUND) from exc


def delete_product(store: DocumentStore, product_id: str) -> None:
    try:
        store.delete("products", product_id)
    except NotFoundError as exc:
        raise NotFoundError(messages.PRODUCT_NOT_FOUND) from exc


class ScreenState(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    NOT_FOUND = "not_found"
    LOAD_ERROR = "load_error"
    DELETED = "deleted"


class ProductDetailScreen:
    """Single product view with step quantity edits and two-step delete.

    Quantity edits are applied locally first and then written to the store
    as an absolute value. A failed write is logged and reported, but the
    local value is kept, so the screen can disagree with the store until the
    next ``load()``.
    """

    def __init__(self, store: DocumentStore, product_id: str):
        self.store = store
        self.product_id = product_id
        self.state = ScreenState.LOADING
        self.product: ProductRecord | None = None
        self.quantity = 0
        self.confirming_delete = False
        self.error: str | None = None
        self.notice: Notice | None = None

    def load(self) -> ScreenState:
        self.state = ScreenState.LOADING
        self.error = None
        try:
            product = get_product(self.store, self.product_id)
        except NotFoundError:
            self.product = None
            self.error = messages.PRODUCT_NOT_FOUND
            self.state = ScreenState.NOT_FOUND
        except StoreError:
            logger.exception("Error loading product %s", self.product_id)
            self.product = None
            self.error = messages.PRODUCT_LOAD_FAILED
            self.state = ScreenState.LOAD_ERROR
        else:
            self.product = product
            self.quantity = product.quantity
            self.state = ScreenState.LOADED
        return self.state

    @property
    def can_decrement(self) -> bool:
        return self.state == ScreenState.LOADED and self.quantity > 0

    def adjust_quantity(self, delta: int) -> bool:
        if delta not in (1, -1):
            raise ValidationError("Quantity changes in steps of one")
        if self.state != ScreenState.LOADED or self.product is None:
            return False
        new_quantity = self.quantity + delta
        if new_quantity < 0:
            return False

        self.quantity = new_quantity
        try:
            set_product_quantity(self.store, self.product.id, new_quantity)
        except (NotFoundError, StoreError):
            logger.exception("Error updating quantity for product %s", self.product.id)
            self.notice = Notice(kind="error", message=messages.QUANTITY_UPDATE_FAILED)
            return False
        return True

    def increment(self) -> bool:
        return self.adjust_quantity(1)

    def decrement(self) -> bool:
        return self.adjust_quantity(-1)

    def request_delete(self) -> str:
        if self.state != ScreenState.LOADED or self.product is None:
            raise NotFoundError(messages.PRODUCT_NOT_FOUND)
        self.confirming_delete = True
        return messages.CONFIRM_DELETE.format(name=self.product.name)

    def cancel_delete(self) -> None:
        self.confirming_delete = False

    def confirm_delete(self) -> SubmitOutcome:
        if not self.confirming_delete or self.product is None:
            raise ConfirmationRequiredError(messages.DELETE_NOT_CONFIRMED)
        try:
            delete_product(self.store, self.product.id)
        except (NotFoundError, StoreError):
            logger.exception("Error deleting product %s", self.product.id)
            self.notice = Notice(kind="error", message=messages.PRODUCT_DELETE_FAILED)
            return SubmitOutcome(ok=False, notice=self.notice, failure="store")

        self.confirming_delete = False
        self.state = ScreenState.DELETED
        self.notice = Notice(kind="success", message=messages.PRODUCT_DELETED)
        return SubmitOutcome(ok=True, notice=self.notice, redirect_to=PRODUCT_LIST)

    def view(self) -> ProductDetailOut:
        if self.state != ScreenState.LOADED or self.product is None:
            raise NotFoundError(self.error or messages.PRODUCT_NOT_FOUND)
        return ProductDetailOut(
            product=self.product,
            quantity=self.quantity,
            unit=self.product.unit,
            warehouse_name=settings.main_warehouse_name,
            stock_status=messages.IN_STOCK if self.quantity > 0 else messages.OUT_OF_STOCK,
            barcode=self.product.barcode or self.product.id,
            movement_history=[],
            can_decrement=self.can_decrement,
            confirming_delete=self.confirming_delete,
        )
