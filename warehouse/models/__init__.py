from warehouse.models.documents import Category, Product, Transaction

__all__ = [
    "Category",
    "Product",
    "Transaction",
]
