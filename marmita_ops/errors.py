"""Exception types raised inside marmita_ops.

None of these are fatal to the process: the dispatcher turns each one into
a reply (or the help menu) scoped to the message being handled.
"""


class MarmitaOpsError(Exception):
    """Base class for all marmita_ops errors."""


class StoreError(MarmitaOpsError):
    """A ledger read or write failed."""

    def __init__(self, operation: str, message: str = ""):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}" if message else f"{operation} failed")


class ClassifierError(MarmitaOpsError):
    """The classifier could not produce a response (no key, API error, empty text)."""
