__all__ = ["ServiceError", "NotFound", "RestaurantNotFound", "DishNotFound", "OrderNotFound",
           "Unauthorized", "AlreadyAssigned", "ValidationFailure", "InternalFailure"]


class ServiceError(Exception):
    """Base for failures a service reports back as ``{ok: False, error: message}``."""

    message = "Something went wrong"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class NotFound(ServiceError):
    message = "Not found"


class RestaurantNotFound(NotFound):
    message = "Could not find restaurant"


class DishNotFound(NotFound):
    message = "Could not find dish"


class OrderNotFound(NotFound):
    message = "Order not found"


class Unauthorized(ServiceError):
    message = "Unauthorized user"


class AlreadyAssigned(ServiceError):
    message = "Order already has a driver"


class ValidationFailure(ServiceError):
    message = "Invalid input"


class InternalFailure(ServiceError):
    message = "Internal error"
