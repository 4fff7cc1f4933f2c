# o2o_shop/core/exceptions.py
from fastapi import status


class BusinessException(Exception):
    """
    Base class for domain errors surfaced to API callers.

    `code` doubles as the HTTP status used by the exception handler.
    """

    def __init__(self, message: str, code: int = status.HTTP_400_BAD_REQUEST):
        self.message = message
        self.code = code
        super().__init__(message)


class ProductOperationError(BusinessException):
    """A write against the product tables failed or touched no rows."""

    def __init__(self, message: str):
        super().__init__(message, code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class ProductNotFoundError(BusinessException):
    def __init__(self, product_id: int | None):
        self.product_id = product_id
        super().__init__(
            f"Product not found: {product_id}",
            code=status.HTTP_404_NOT_FOUND,
        )


class ImageProcessingError(BusinessException):
    """Uploads are not decodable images, or there are too many of them."""

    def __init__(self, message: str):
        super().__init__(message, code=status.HTTP_400_BAD_REQUEST)
