from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator, model_validator

from warehouse.core.errors import StoreError

TransactionType = Literal["expense", "income"]

RecordT = TypeVar("RecordT", bound=BaseModel)


class ProductRecord(BaseModel):
    id: str = Field(min_length=1)
    name: str
    unit: str
    category: str | None = None
    quantity: int = Field(default=0, ge=0)
    average_purchase_price: Decimal = Field(default=Decimal("0"), ge=0, alias="averagePurchasePrice")
    image: str | None = None
    barcode: str | None = None

    model_config = {"populate_by_name": True}

    @field_validator("quantity", mode="before")
    @classmethod
    def _missing_quantity_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("average_purchase_price", mode="before")
    @classmethod
    def _missing_price_is_zero(cls, value: Any) -> Any:
        return Decimal("0") if value is None else value


class CategoryRecord(BaseModel):
    id: str = Field(min_length=1)
    title: str
    row: int
    is_visible: bool | None = Field(default=True, alias="isVisible")

    model_config = {"populate_by_name": True}


class TransactionRecord(BaseModel):
    category_id: str = Field(min_length=1, alias="categoryId")
    from_user: str = Field(alias="fromUser")
    to_user: str = Field(alias="toUser")
    amount: Decimal
    description: str
    type: TransactionType
    date: datetime | None = None
    is_warehouse_operation: bool = Field(default=False, alias="isWarehouseOperation")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _amount_follows_direction(self) -> "TransactionRecord":
        if self.type == "expense" and self.amount > 0:
            raise ValueError("expense transactions carry a non-positive amount")
        if self.type == "income" and self.amount < 0:
            raise ValueError("income transactions carry a non-negative amount")
        return self

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"date"})


def parse_record(model: type[RecordT], document: dict[str, Any]) -> RecordT:
    """Validate a stored document, failing closed on malformed data."""
    try:
        return model.model_validate(document)
    except PydanticValidationError as exc:
        raise StoreError(f"Malformed {model.__name__} document: {exc.error_count()} error(s)") from exc
