"""Custom exceptions for the PantryPal application."""

class PantryError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class ValidationError(PantryError):
    """Missing or malformed input."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)

class NotFoundError(PantryError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", status_code=404, payload=None):
        super().__init__(message, status_code, payload)

class ProductNotFoundError(NotFoundError):
    def __init__(self, message="Product not found"):
        super().__init__(message)

class RetailerNotFoundError(NotFoundError):
    """The authenticated user has no retailer profile."""
    def __init__(self, message="Retailer not found"):
        super().__init__(message, status_code=400)

class InvalidClaimCodeError(NotFoundError):
    """No sale carries the given claim code."""
    def __init__(self, message="Invalid claim code"):
        super().__init__(message, status_code=400)

class StockError(PantryError):
    """Demand exceeds eligible supply for a product."""
    def __init__(self, message, product_id, payload=None):
        rv = dict(payload or ())
        rv['product_id'] = product_id
        super().__init__(message, 400, rv)
        self.product_id = product_id

class OutOfStockError(StockError):
    """No eligible batch exists for the product."""
    def __init__(self, product_id):
        super().__init__(f"No available stock for product {product_id}", product_id)

class InsufficientStockError(StockError):
    """Eligible batches exist but cannot cover the requested quantity."""
    def __init__(self, product_id, requested, available):
        message = (
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}"
        )
        super().__init__(message, product_id, {'requested': requested, 'available': available})
        self.requested = requested
        self.available = available

class ConflictError(PantryError):
    """The operation conflicts with the current state of a resource."""
    def __init__(self, message, status_code=409, payload=None):
        super().__init__(message, status_code, payload)

class AlreadyClaimedError(ConflictError):
    def __init__(self, message="This purchase has already been claimed"):
        super().__init__(message, status_code=400)

class TransientStoreError(PantryError):
    """Storage unavailable, deadlocked or raced; the whole request may be retried."""
    def __init__(self, message="Service temporarily unavailable, please retry"):
        super().__init__(message, 503)

class ClaimCodeExhaustedError(PantryError):
    """No free claim code found within the attempt budget."""
    def __init__(self, attempts):
        super().__init__(f"Could not allocate a unique claim code after {attempts} attempts", 500)
        self.attempts = attempts

class UnauthorizedError(PantryError):
    """Raised when the request carries no valid credentials."""
    def __init__(self, message="Invalid or expired token"):
        super().__init__(message, 401)

class ForbiddenError(PantryError):
    """Raised when a user lacks permission for an action."""
    def __init__(self, message="Access denied"):
        super().__init__(message, 403)
