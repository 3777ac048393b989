from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from warehouse.core.errors import (
    ConfirmationRequiredError,
    NotFoundError,
    NotSupportedError,
    StoreError,
    ValidationError,
    WarehouseError,
)
from warehouse.db.database import get_db
from warehouse.db.store import DocumentStore

ERROR_STATUS: list[tuple[type[WarehouseError], int]] = [
    (ConfirmationRequiredError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NotSupportedError, status.HTTP_501_NOT_IMPLEMENTED),
    (StoreError, status.HTTP_502_BAD_GATEWAY),
]


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def http_error(exc: WarehouseError) -> HTTPException:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)
