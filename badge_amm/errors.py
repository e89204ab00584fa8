"""Badge market error classes.

Every failure is raised synchronously and leaves no partial state behind.
Arithmetic failures come from SafeInt (see badge_amm.safe_int).
"""


class BadgeMarketError(Exception):
    """Base error for badge market operations."""

    pass


class AuthorizationError(BadgeMarketError):
    """Caller is not on an allow-list, is deny-listed, or lacks a required tier."""

    pass


class InsufficientTierError(AuthorizationError):
    """Caller's membership tier is below the configured minimum."""

    pass


class NoProfileError(BadgeMarketError):
    """Tier oracle has no profile bound to the user."""

    pass


class DuplicateCreatorError(BadgeMarketError):
    """Creator already owns a pool."""

    pass


class InvalidParameterError(BadgeMarketError):
    """A request parameter is out of range."""

    pass


class InvalidCurveConstantError(InvalidParameterError):
    """Curve constant is not positive or not on the allow-list."""

    pass


class UnsupportedAssetError(InvalidParameterError):
    """Payment asset is not on the allow-list."""

    pass


class RevenueShareTooHighError(InvalidParameterError):
    """Revenue share exceeds the configured ceiling."""

    pass


class InvalidAmountError(InvalidParameterError):
    """Trade or bonus amount is zero or above the per-trade maximum."""

    pass


class UnknownPoolError(BadgeMarketError):
    """No pool exists with the given id."""

    pass


class PremintRequiredError(BadgeMarketError):
    """Privileged pool must be preminted by an authorized preminter first."""

    pass


class SlippageExceededError(BadgeMarketError):
    """Quoted cost or proceeds violate the caller's bound."""

    pass


class InsufficientFundsError(BadgeMarketError):
    """Caller paid too little or holds too few units."""

    pass


class EmptyReserveError(BadgeMarketError):
    """Bonus injection attempted on a pool with zero reserve."""

    pass


class PausedError(BadgeMarketError):
    """Market is paused."""

    pass


class ReentrantCallError(BadgeMarketError):
    """Operation re-entered a pool that is already settling."""

    pass


class TransferRejectedError(BadgeMarketError):
    """Value transfer collaborator refused a payment."""

    pass
