"""Exception types raised by the Cycle Garden engine.

Only ``ValidationError`` and ``SetupRequiredError`` ever reach the user.
Missing ledger entries on delete are a no-op and negative day counts are
clamped, so neither has an exception type of its own.
"""

from __future__ import annotations


class GardenError(Exception):
    """Base class for all Cycle Garden engine errors."""


class ValidationError(GardenError, ValueError):
    """Raised when user input is missing or outside an enumerated set.

    The operation that raised it has not mutated any state.
    """


class SetupRequiredError(GardenError):
    """Raised when an operation needs a cycle baseline that was never set up."""


class ExternalServiceError(GardenError):
    """Raised by the chat companion when the text-generation service fails.

    Always caught at the service boundary and turned into a fallback reply.
    """
