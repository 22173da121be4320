from typing import Optional

from fastapi import status


class InventoryError(Exception):
    """Base for stock mutation failures. Carries the HTTP status routers should answer with."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Inventory operation failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidQuantity(InventoryError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Quantity must be greater than 0"


class SweetNotFound(InventoryError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Sweet not found"


class InsufficientStock(InventoryError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Insufficient quantity in stock"


class Forbidden(InventoryError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Admin access required"


class StoreFailure(InventoryError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to update stock"
