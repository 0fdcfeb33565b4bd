"""
Error taxonomy and classification for Gemini failures.

Gemini reports a rejected API key only through the error message, so the
default rule matches known marker substrings. The rule is a plain predicate
that services accept in their constructors; swap it there if the provider's
wording changes.
"""

from enum import Enum
from typing import Callable

from sports_hub.constants import API_KEY_ERROR_MESSAGE

INVALID_KEY_MARKERS = (
    "API key not valid",
    "API_KEY_INVALID",
)


class SportsHubError(Exception):
    """Base class for Sports Hub errors."""


class CredentialMissingOrInvalid(SportsHubError):
    """The API key is missing, malformed or rejected by Gemini."""

    def __init__(self, message: str = API_KEY_ERROR_MESSAGE):
        super().__init__(message)


class SessionNotInitialized(SportsHubError):
    """A chat turn was sent before a chat session was created."""

    def __init__(
        self, message: str = "Chat session not initialized. Cannot send message."
    ):
        super().__init__(message)


class ParseFailure(SportsHubError):
    """Gemini's reply could not be parsed into articles."""


class ErrorKind(str, Enum):
    """Outcome of classifying a failure."""

    CREDENTIAL_INVALID = "credential_invalid"
    OTHER = "other"


CredentialPredicate = Callable[[BaseException], bool]


def is_invalid_credential_error(error: BaseException) -> bool:
    """Default rule: our own credential error, or a known marker in the message."""
    if isinstance(error, CredentialMissingOrInvalid):
        return True
    message = str(error)
    return any(marker in message for marker in INVALID_KEY_MARKERS)


def classify(
    error: BaseException, predicate: CredentialPredicate = is_invalid_credential_error
) -> ErrorKind:
    """Classifies a failure as a credential problem or anything else."""
    if predicate(error):
        return ErrorKind.CREDENTIAL_INVALID
    return ErrorKind.OTHER
