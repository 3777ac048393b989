from dataclasses import dataclass, field

from warehouse.schemas.warehouse import ExpenseLineItem

WAREHOUSE_ROOT = "/warehouse"
PRODUCT_LIST = "/warehouse/products"


@dataclass
class NavigationPayload:
    added_item: ExpenseLineItem | None = None
    selected_project: str | None = None


@dataclass
class NavigationMessage:
    """Payload handed from one screen to the next, readable exactly once."""

    added_item: ExpenseLineItem | None = None
    selected_project: str | None = None
    _consumed: bool = field(default=False, init=False, repr=False)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self) -> NavigationPayload | None:
        if self._consumed:
            return None
        self._consumed = True
        return NavigationPayload(added_item=self.added_item, selected_project=self.selected_project)
