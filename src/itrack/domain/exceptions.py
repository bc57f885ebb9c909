"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each kind carries the HTTP status a transport layer should answer with.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    http_status = 500


class ValidationError(DomainException):
    """Malformed or incomplete input. The caller must fix it; never retried."""

    http_status = 400


class NotFoundError(DomainException):
    """A referenced entity does not exist."""

    http_status = 404


class InsufficientStockError(DomainException):
    """A conditional stock debit was refused.

    ``available`` is the stock read at the moment of failure, which can
    differ from what validation saw if stock moved concurrently.
    """

    http_status = 409

    def __init__(self, product_name: str, available, required) -> None:
        self.product_name = product_name
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Required: {required}"
        )


class ProvisioningError(DomainException):
    """New products could not be created in the expected number."""


class ConsistencyError(DomainException):
    """Resolved entities do not match what was requested (race or bug)."""


class NotificationError(DomainException):
    """The notification channel refused or failed to deliver.

    Soft failure: returned inside an alert outcome, never raised to the
    caller of a stock mutation.
    """

    http_status = 502

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: str | None = None,
        response_code: int | None = None,
    ) -> None:
        self.code = code
        self.details = details
        self.response_code = response_code
        super().__init__(message)

    def as_dict(self) -> dict:
        return {
            "message": str(self),
            "code": self.code,
            "details": self.details,
            "response_code": self.response_code,
        }
