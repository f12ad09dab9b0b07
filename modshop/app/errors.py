"""
errors.py — AppError base class and error code registry.

Every error returned by the ModShop API must use a code defined here.
Do not raise strings or generic exceptions from service or route code.

Rules:
  - Error codes are a versioned contract. They do not change once published.
  - Error messages are human-readable prose. They may be improved at any time.
  - Never conflate 401 (unauthenticated) with 403 (unauthorized). See AUTH section below.
"""

from __future__ import annotations


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.field       = field  # which request field caused the error

    def to_dict(self) -> dict:
        payload = {
            "code":    self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return {"error": payload}

    def __repr__(self) -> str:
        return (
            f"AppError(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


# ── Error Code Registry ────────────────────────────────────────────────────
#
# Organised by category. HTTP status is indicated in the comment.
#
# IMPORTANT: these are the string values sent in the API response.
# Do not rename them without a major version bump.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Schema / Input Errors (400) ────────────────────────────────────────
    MISSING_FIELD              = "MISSING_FIELD"
    INVALID_FIELD              = "INVALID_FIELD"
    INVALID_PRICE_PRECISION    = "INVALID_PRICE_PRECISION"

    # ── Conflict Errors (409) ──────────────────────────────────────────────
    DUPLICATE_EMAIL            = "DUPLICATE_EMAIL"
    DUPLICATE_USERNAME         = "DUPLICATE_USERNAME"
    DUPLICATE_GROUP_NAME       = "DUPLICATE_GROUP_NAME"
    ALREADY_MEMBER             = "ALREADY_MEMBER"
    CUSTOMER_IN_USE            = "CUSTOMER_IN_USE"
    PRODUCT_IN_USE             = "PRODUCT_IN_USE"

    # ── Not Found Errors (404) ─────────────────────────────────────────────
    PRODUCT_NOT_FOUND          = "PRODUCT_NOT_FOUND"
    CUSTOMER_NOT_FOUND         = "CUSTOMER_NOT_FOUND"
    ORDER_NOT_FOUND            = "ORDER_NOT_FOUND"
    USER_NOT_FOUND             = "USER_NOT_FOUND"
    GROUP_NOT_FOUND            = "GROUP_NOT_FOUND"
    NOT_A_MEMBER               = "NOT_A_MEMBER"

    # ── Referential Integrity (422) ───────────────────────────────────────
    # An order payload names a customer or product that does not exist.
    INVALID_REFERENCE          = "INVALID_REFERENCE"

    # ── Auth Errors ────────────────────────────────────────────────────────
    # 401 = we do not know who you are (unauthenticated)
    # 403 = we know who you are, but your groups do not allow this
    # These must NEVER be swapped.
    INVALID_CREDENTIALS        = "INVALID_CREDENTIALS"    # 401
    ACCOUNT_INACTIVE           = "ACCOUNT_INACTIVE"       # 401
    TOKEN_MISSING              = "TOKEN_MISSING"          # 401
    TOKEN_INVALID              = "TOKEN_INVALID"          # 401
    TOKEN_EXPIRED              = "TOKEN_EXPIRED"          # 401
    FORBIDDEN                  = "FORBIDDEN"              # 403

    # ── Routing Errors ─────────────────────────────────────────────────────
    NOT_FOUND                  = "NOT_FOUND"              # 404, unknown route
    METHOD_NOT_ALLOWED         = "METHOD_NOT_ALLOWED"     # 405

    # ── System Errors (500) ────────────────────────────────────────────────
    INTERNAL_ERROR             = "INTERNAL_ERROR"
