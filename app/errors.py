class BotError(Exception):
    """Base class for the bot's own errors."""


class StoreUnavailable(BotError):
    """The ledger or session backing store failed; the event gets a generic reply."""


class NegativeBalance(BotError, ValueError):
    """A delta would have taken a balance below zero."""
