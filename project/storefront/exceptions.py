# storefront/exceptions.py

"""
Ошибки магазина. Каждая несёт HTTP-статус, с которым её отдаёт обработчик
в main.py: {"error": message}.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidOrder(StorefrontError):
    """Данные заказа не прошли проверку. field: какое поле виновато."""
    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class RateLimited(StorefrontError):
    status_code = 429

    def __init__(self, message: str = "Too Many Requests"):
        super().__init__(message)


class Unauthorized(StorefrontError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ServerMisconfigured(StorefrontError):
    status_code = 500

    def __init__(self, message: str = "Server misconfigured"):
        super().__init__(message)


class UpstreamFailure(StorefrontError):
    """Ошибка базы или почтового провайдера."""
    status_code = 500


class OrderNotFound(StorefrontError):
    status_code = 404

    def __init__(self, order_id: str):
        super().__init__("Order not found")
        self.order_id = order_id


class DuplicateOrder(StorefrontError):
    """Заказ с таким id уже записан."""
    status_code = 409

    def __init__(self, order_id: str):
        super().__init__("Order already exists")
        self.order_id = order_id
