"""Failure classes raised by the voucher store and lifecycle services."""

from __future__ import annotations

from typing import Optional


class VoucherError(Exception):
    """Base error; ``status_code`` is the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, detail: str, status_code: Optional[int] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class VoucherValidationError(VoucherError):
    """Input rejected before any storage access."""

    status_code = 400


class NotFound(VoucherError):
    status_code = 404


class CustomerNotFound(NotFound):
    def __init__(self, email: str) -> None:
        super().__init__(f"customer with email {email} not found")
        self.email = email


class VoucherNotFound(NotFound):
    def __init__(self, code: str) -> None:
        super().__init__(f"voucher {code} not found")
        self.code = code


class AlreadyRedeemed(VoucherError):
    """Terminal: the voucher's ``used_at`` is already set."""

    status_code = 400

    def __init__(self, code: str) -> None:
        super().__init__("this voucher has been redeemed")
        self.code = code


class Expired(VoucherError):
    """Terminal: the voucher expired before the redemption attempt."""

    def __init__(self, code: str) -> None:
        super().__init__("voucher expired")
        self.code = code


class StorageError(VoucherError):
    """Database fault.

    When the rollback that followed the fault failed too, both causes are kept:
    ``original`` is the first error and ``rollback_error`` the rollback one.
    """

    def __init__(
        self,
        detail: str,
        *,
        original: Optional[BaseException] = None,
        rollback_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(detail)
        self.original = original
        self.rollback_error = rollback_error


class OfferUpsertError(StorageError):
    """The offer upsert returned no usable identifier."""


class InconsistentResult(VoucherError):
    """The store returned a malformed result."""
