from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from warehouse.schemas.documents import CategoryRecord, ProductRecord

NoticeKind = Literal["success", "error", "info"]
FailureReason = Literal["validation", "not_found", "store"]


class Notice(BaseModel):
    kind: NoticeKind
    message: str


class SubmitOutcome(BaseModel):
    ok: bool
    notice: Notice | None = None
    redirect_to: str | None = None
    failure: FailureReason | None = None


class ExpenseLineItem(BaseModel):
    product: ProductRecord
    quantity: int

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.product.average_purchase_price


class ExpenseTotals(BaseModel):
    quantity: int
    amount: Decimal
    total: Decimal


class ExpenseItemIn(BaseModel):
    product_id: str
    quantity: int


class ExpenseSubmitRequest(BaseModel):
    project_id: str = ""
    document_date: date | None = None
    document_number: str | None = Field(default=None, max_length=32)
    note: str | None = Field(default=None, max_length=255)
    items: list[ExpenseItemIn] = Field(default_factory=list)


class ExpenseSubmitOut(BaseModel):
    notice: Notice
    redirect_to: str | None
    totals: ExpenseTotals


class QuantityChangeRequest(BaseModel):
    delta: Literal[1, -1]


class ProductDetailOut(BaseModel):
    product: ProductRecord
    quantity: int
    unit: str
    warehouse_name: str
    stock_status: str
    barcode: str
    movement_history: list[str]
    can_decrement: bool
    confirming_delete: bool


class ProductActionOut(BaseModel):
    action: str
    label: str


class IncomeHeaderOut(BaseModel):
    document_date: date
    document_number: str
    supplier_id: str
    note: str
    counterparties: list[CategoryRecord]
    loading: bool
    error: str | None


class IncomeSubmitRequest(BaseModel):
    supplier_id: str = ""
    document_date: date | None = None
    document_number: str | None = Field(default=None, max_length=32)
    note: str | None = Field(default=None, max_length=255)
