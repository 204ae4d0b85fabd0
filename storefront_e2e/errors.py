from __future__ import annotations


class VerificationError(Exception):
    """Base for every failure a scenario can report."""


class Inconclusive(VerificationError):
    """Nothing to verify; the scenario ends without asserting."""


class NoProductsListed(Inconclusive):
    def __init__(self) -> None:
        super().__init__("API returned an empty product list")


class ApiError(VerificationError):
    def __init__(self, path: str, status_code: int | None, body: str = ""):
        self.path = path
        self.status_code = status_code
        if status_code is None:
            super().__init__(f"Store API request to {path} failed: {body[:500]}")
        else:
            super().__init__(f"Store API error {status_code} for {path}: {body[:500]}")


class DataInconsistencyError(VerificationError):
    pass


class PriceDetailMissing(DataInconsistencyError):
    def __init__(self, product_id: str, reason: str = ""):
        self.product_id = product_id
        msg = f"Price details missing for product ID: {product_id}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class AssertionMismatch(VerificationError, AssertionError):
    pass


class LengthMismatch(AssertionMismatch):
    def __init__(self, actual: int, expected: int):
        self.actual = actual
        self.expected = expected
        super().__init__(f"Product count mismatch: UI has {actual}, API has {expected}")


class ContentMismatch(AssertionMismatch):
    def __init__(self, index: int, actual: object, expected: object):
        self.index = index
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"Product mismatch at row {index}: expected {expected!r}, got {actual!r}"
        )


class FieldMismatch(AssertionMismatch):
    def __init__(self, field: str, expected: str, actual: str, *, contains: bool = False):
        self.field = field
        self.expected = expected
        self.actual = actual
        self.contains = contains
        want = f"text containing {expected!r}" if contains else repr(expected)
        super().__init__(f"{field}: expected {want}, got {actual!r}")


class ReceiptMismatch(AssertionMismatch):
    def __init__(self, mismatches: list[FieldMismatch]):
        self.mismatches = mismatches
        lines = ["Receipt does not match expectation:"]
        lines += [f"  - {m}" for m in mismatches]
        super().__init__("\n".join(lines))


class InteractionTimeout(VerificationError):
    def __init__(self, condition: str, timeout_ms: float):
        self.condition = condition
        self.timeout_ms = timeout_ms
        super().__init__(f"Timed out after {timeout_ms:g} ms waiting for {condition}")


class InteractionFailed(VerificationError):
    """The browser refused an action (missing option, detached element, crashed page)."""

    def __init__(self, action: str, reason: str):
        self.action = action
        self.reason = reason
        super().__init__(f"Browser action failed ({action}): {reason}")


class UnexpectedTransitionError(VerificationError):
    pass


class WrongStateError(VerificationError):
    pass
