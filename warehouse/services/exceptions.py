"""
Erreurs typées du moteur d'inventaire.

    InventoryError
    +-- ConnectivityError
    +-- QueryError
    |   +-- DeadlineExceededError
    +-- WriteError
    +-- ProductNotFoundError
    +-- OutOfStockError

Chaque erreur porte un `code` stable ; l'adaptateur HTTP choisit le status.
"""


class InventoryError(Exception):
    code: str = "INVENTORY_ERROR"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or "inventory operation failed"
        super().__init__(self.message)


class ConnectivityError(InventoryError):
    code = "CONNECTIVITY"


class QueryError(InventoryError):
    code = "QUERY_FAILED"


class DeadlineExceededError(QueryError):
    code = "DEADLINE_EXCEEDED"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "deadline exceeded before the operation completed")


class WriteError(InventoryError):
    code = "WRITE_FAILED"


class ProductNotFoundError(InventoryError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_name: str) -> None:
        self.product_name = product_name
        super().__init__("this product is not in system, cannot be sold")


class OutOfStockError(InventoryError):
    code = "OUT_OF_STOCK"

    def __init__(self, product_name: str) -> None:
        self.product_name = product_name
        super().__init__("this product is not in stock, cannot be sold")
