"""Unified error codes and custom exceptions.

Error code ranges:
  2xxx: Ledger
  4xxx: Event / command validation
  6xxx: Chat platform (Slack)
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 2xxx: Ledger ---

class InsufficientFundsError(AppError):
    """Transfer sender cannot cover the amount. Nothing was written."""

    def __init__(self, amount: int, available: int) -> None:
        self.amount = amount
        self.available = available
        super().__init__(
            2001,
            f"Unable to send {amount} willowbucks (you have a balance of {available})",
            422,
        )


class PartialTransferFailureError(AppError):
    """Sender debit committed but the receiver credit did not.

    There is no rollback. `committed_balance` is the sender balance that is now
    stored, so an operator can credit `amount` back (or forward) by hand.
    """

    def __init__(
        self,
        from_user: str,
        to_user: str,
        amount: int,
        committed_balance: int,
    ) -> None:
        self.from_user = from_user
        self.to_user = to_user
        self.amount = amount
        self.committed_balance = committed_balance
        super().__init__(
            2002,
            f"Transfer of {amount} from {from_user} to {to_user} partially applied: "
            f"{from_user} debited (balance now {committed_balance}), "
            f"{to_user} not credited",
            500,
        )


# --- 4xxx: Event / command validation ---

class UnknownSenderError(AppError):
    def __init__(self) -> None:
        super().__init__(4002, "unknown sender", 422)


class UnknownReceiverError(AppError):
    def __init__(self) -> None:
        super().__init__(4003, "unknown receiver", 422)


class UnknownChannelError(AppError):
    def __init__(self) -> None:
        super().__init__(4004, "unknown channel", 422)


class SelfReactionError(AppError):
    def __init__(self) -> None:
        super().__init__(4005, "Self-reaction requests are ignored", 422)


class UnknownEventTypeError(AppError):
    def __init__(self, event_type: str) -> None:
        super().__init__(4006, f"unknown event type: {event_type}", 422)


class UserNotFoundError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(4007, f"user not found: {name}", 404)


# --- 6xxx: Slack ---

class SlackApiError(AppError):
    def __init__(self, method: str, error: str) -> None:
        self.method = method
        self.error = error
        super().__init__(6001, f"Slack API {method} failed: {error}", 502)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class StorageUnavailableError(AppError):
    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(9003, f"Storage unavailable during {operation}: {detail}", 503)
