from enum import Enum

from warehouse.core import messages
from warehouse.schemas.documents import ProductRecord


class ProductAction(str, Enum):
    MOVE_TO_FOLDER = "move_to_folder"
    VIEW_MOVEMENT = "view_movement"
    VIEW_STOCK_BY_WAREHOUSE = "view_stock_by_warehouse"
    DELETE = "delete"

    @property
    def label(self) -> str:
        return ACTION_LABELS[self]


ACTION_LABELS: dict[ProductAction, str] = {
    ProductAction.MOVE_TO_FOLDER: messages.ACTION_MOVE_TO_FOLDER,
    ProductAction.VIEW_MOVEMENT: messages.ACTION_VIEW_MOVEMENT,
    ProductAction.VIEW_STOCK_BY_WAREHOUSE: messages.ACTION_VIEW_STOCK,
    ProductAction.DELETE: messages.ACTION_DELETE,
}


class ActionMenu:
    """Actions offered for a selected product; tracks which modal is open."""

    def __init__(self, product: ProductRecord):
        self.product = product
        self.open_modal: ProductAction | None = None

    def actions(self) -> list[ProductAction]:
        return list(ProductAction)

    def open(self, action: ProductAction | str) -> ProductAction:
        self.open_modal = ProductAction(action)
        return self.open_modal

    def close(self) -> None:
        self.open_modal = None

    def is_open(self, action: ProductAction | str) -> bool:
        return self.open_modal is not None and self.open_modal == ProductAction(action)
