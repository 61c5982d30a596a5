"""Error taxonomy for storefront operations.

Each error carries a stable ``reason`` string that API clients and tests can
assert on, and the HTTP status it maps to. Field-level input problems are
reported with Protean's ``ValidationError`` instead.
"""


class StorefrontError(Exception):
    """Base class for rejections raised by storefront handlers."""

    status_code = 400
    default_reason = "rejected"

    def __init__(self, reason: str | None = None, message: str | None = None, **context) -> None:
        self.reason = reason or self.default_reason
        self.message = message or self.reason.replace("_", " ")
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {"reason": self.reason, "message": self.message}
        if self.context:
            payload["context"] = {key: str(value) for key, value in self.context.items()}
        return payload


class NotFound(StorefrontError):
    status_code = 404
    default_reason = "not_found"


class Conflict(StorefrontError):
    """Uniqueness or state-precondition violation."""

    status_code = 409
    default_reason = "conflict"


class ExternalDependencyError(StorefrontError):
    """Payment processor or rate provider unreachable. Retryable by the caller."""

    status_code = 503
    default_reason = "dependency_unavailable"


class IntegrityViolation(StorefrontError):
    """Signature or amount mismatch during payment verification."""

    status_code = 400
    default_reason = "integrity_violation"


class CouponRejected(StorefrontError):
    status_code = 400
    default_reason = "coupon_rejected"


class AccessDenied(StorefrontError):
    status_code = 403
    default_reason = "forbidden"


class Unauthenticated(StorefrontError):
    status_code = 401
    default_reason = "unauthenticated"
