class WarehouseError(Exception):
    """Base class for failures raised by warehouse workflows."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WarehouseError):
    """Input rejected before any store call was made."""


class ConfirmationRequiredError(ValidationError):
    pass


class NotFoundError(WarehouseError):
    pass


class StoreError(WarehouseError):
    """The document store failed or returned a malformed document."""


class NotSupportedError(WarehouseError):
    pass
