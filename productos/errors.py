"""Data-access errors raised by the product repository.

NotFoundError maps to 404, QueryError to 500. Handlers decide the
message shown to the client; these carry the detail for the logs.
"""


class ProductError(Exception):
    """Base class for repository failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ProductError):
    """No row matched the given id."""

    def __init__(self, product_id: int):
        super().__init__(f"Product with id {product_id} not found.")
        self.product_id = product_id


class QueryError(ProductError):
    """The statement failed for any reason other than a missing row."""

    def __init__(self, message: str, operation: str):
        super().__init__(message)
        self.operation = operation
