"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Coins (balances, purchases, gifts)
  3xxx: Earnings/Payouts
  9xxx: System

Every error is a deterministic validation failure reported straight to the
caller. Nothing here is retried.
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


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


# --- 2xxx: Coins ---

class InvalidAmountError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2001, f"Invalid amount: {detail}", 422)


class InsufficientCoinsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2002,
            f"Insufficient coins: required {required}, available {available}",
            422,
        )


class CoinBalanceNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2003, f"Coin balance not found for user {user_id}", 404)


class CoinPackageNotFoundError(AppError):
    def __init__(self, package_id: int) -> None:
        super().__init__(2004, f"Coin package not found: {package_id}", 404)


class SelfGiftError(AppError):
    def __init__(self) -> None:
        super().__init__(2005, "Cannot gift coins to yourself", 422)


class RecipientNotFoundError(AppError):
    def __init__(self, recipient_id: str) -> None:
        super().__init__(2006, f"Recipient not found: {recipient_id}", 404)


class DuplicateRequestError(AppError):
    def __init__(self, idempotency_key: str) -> None:
        super().__init__(
            2007, f"Request with Idempotency-Key {idempotency_key} is still in progress", 409
        )


# --- 3xxx: Earnings/Payouts ---

class BelowMinimumPayoutError(AppError):
    def __init__(self, net_cents: int, minimum_cents: int) -> None:
        super().__init__(
            3001,
            f"Payout below minimum: net {net_cents} cents, minimum {minimum_cents} cents",
            422,
        )


class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            3002,
            f"Insufficient balance for payout: requested {required} coins, "
            f"available {available} coins",
            422,
        )


class InvalidStateTransitionError(AppError):
    def __init__(self, payout_id: str, current: str, target: str) -> None:
        super().__init__(
            3003,
            f"Payout {payout_id} in status {current} cannot move to {target}",
            409,
        )


class PayoutNotFoundError(AppError):
    def __init__(self, payout_id: str) -> None:
        super().__init__(3004, f"Payout not found: {payout_id}", 404)


class ProcessorAuthError(AppError):
    def __init__(self) -> None:
        super().__init__(3005, "Payout processor credentials required", 403)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
