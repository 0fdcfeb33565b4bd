"""
Credential gate for the Gemini client.

Holds at most one API key and the client built from it. Building a client
only checks the key locally; Gemini itself rejects a bad key on the first
real call, which the error classifier handles.
"""

import logging
from typing import Callable, Optional

from google import genai

from sports_hub.config import get_api_key
from sports_hub.services.errors import CredentialMissingOrInvalid

logger = logging.getLogger(__name__)


class CredentialGate:
    """Owns the active API key and Gemini client."""

    def __init__(
        self, credential_source: Callable[[], Optional[str]] = get_api_key
    ):
        self.credential_source = credential_source
        self.api_key: Optional[str] = None
        self.client: Optional[genai.Client] = None

    @property
    def is_active(self) -> bool:
        """True while a client is available."""
        return self.client is not None

    def set_credential(self, api_key: Optional[str]) -> None:
        """Builds a Gemini client for `api_key` unless it is already active."""
        if not api_key:
            logger.error("Gemini API key is required for initialization.")
            self.invalidate()
            return

        if self.client is not None and self.api_key == api_key:
            return

        try:
            self.client = genai.Client(api_key=api_key)
            self.api_key = api_key
            logger.info("Gemini client initialized.")
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to initialize Gemini client: %s", e)
            self.invalidate()

    def invalidate(self) -> None:
        """Drops the active key and client."""
        self.client = None
        self.api_key = None

    def get_active_client(self) -> genai.Client:
        """Returns the active client, re-reading the key source once if needed."""
        if self.client is None:
            api_key = self.credential_source()
            if api_key:
                logger.info("Attempting Gemini re-initialization from key source.")
                self.set_credential(api_key)

        if self.client is None:
            raise CredentialMissingOrInvalid()
        return self.client
