"""
Chat session management for the sports assistant.

One ChatSessionManager owns one Gemini chat session (one conversation). The
session is created once with a fixed persona, tool and safety configuration,
and every later turn goes through it. Unlike the content fetchers, chat turns
never fall back to default content: errors go to the caller, which renders
them as an inline bot turn.
"""

import datetime
import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from google.genai import types

from sports_hub.constants import CHAT_EMPTY_REPLY, THINKING_MODEL
from sports_hub.models import ChatTurn, ContentSource, Sender
from sports_hub.services.credentials import CredentialGate
from sports_hub.services.errors import (
    CredentialMissingOrInvalid,
    CredentialPredicate,
    ErrorKind,
    SessionNotInitialized,
    classify,
    is_invalid_credential_error,
)
from sports_hub.services.normalizer import extract_sources, response_text

logger = logging.getLogger(__name__)

_HARM_CATEGORIES = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)


def make_turn(
    text: str, sender: Sender, sources: Optional[List[ContentSource]] = None
) -> ChatTurn:
    """Builds a chat turn stamped with a fresh id and the current time."""
    turn = ChatTurn(
        id=uuid.uuid4().hex,
        text=text,
        sender=sender,
        timestamp=datetime.datetime.now().isoformat(timespec="seconds"),
    )
    if sources is not None:
        turn["sources"] = sources
    return turn


def enables_search(tool: Any) -> bool:
    """True if `tool` turns on Google Search grounding."""
    if isinstance(tool, dict):
        return tool.get("google_search") is not None or tool.get("googleSearch") is not None
    return getattr(tool, "google_search", None) is not None


def permissive_safety_settings() -> List[types.SafetySetting]:
    """Safety settings with every harm category unblocked."""
    return [
        types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_NONE)
        for category in _HARM_CATEGORIES
    ]


def build_chat_config(
    model: str,
    system_instruction: str,
    tools: Optional[Sequence[Any]] = None,
    thinking_config: Optional[Any] = None,
) -> types.GenerateContentConfig:
    """Builds the fixed configuration a chat session is created with.

    Safety overrides and thinking budgets cannot be combined with Google
    Search, so a search-enabled session carries neither.
    """
    if tools and any(enables_search(tool) for tool in tools):
        return types.GenerateContentConfig(
            system_instruction=system_instruction, tools=list(tools)
        )

    options: Dict[str, Any] = {
        "system_instruction": system_instruction,
        "safety_settings": permissive_safety_settings(),
    }
    if tools:
        options["tools"] = list(tools)
    if thinking_config is not None and model == THINKING_MODEL:
        options["thinking_config"] = thinking_config
    return types.GenerateContentConfig(**options)


class ChatSessionManager:
    """Creates the conversation's chat session and routes turns through it."""

    def __init__(
        self,
        gate: CredentialGate,
        is_credential_error: CredentialPredicate = is_invalid_credential_error,
    ):
        self.gate = gate
        self.is_credential_error = is_credential_error
        self.session: Optional[Any] = None

    @property
    def is_active(self) -> bool:
        """True once a session has been created."""
        return self.session is not None

    def _translate(self, error: Exception) -> Exception:
        if (
            classify(error, self.is_credential_error) is ErrorKind.CREDENTIAL_INVALID
            and not isinstance(error, CredentialMissingOrInvalid)
        ):
            converted = CredentialMissingOrInvalid()
            converted.__cause__ = error
            return converted
        return error

    def create_session(
        self,
        model: str,
        system_instruction: str,
        tools: Optional[Sequence[Any]] = None,
        thinking_config: Optional[Any] = None,
    ) -> Any:
        """Creates the chat session, or returns the one already created."""
        if self.session is not None:
            return self.session

        client = self.gate.get_active_client()
        config = build_chat_config(model, system_instruction, tools, thinking_config)
        try:
            self.session = client.aio.chats.create(model=model, config=config)
        except Exception as e:
            logger.error("Error initializing chat session with Gemini: %s", e)
            raise self._translate(e)
        logger.info("Chat session created with model %s.", model)
        return self.session

    def reset(self) -> None:
        """Forgets the session so the next conversation starts fresh."""
        self.session = None

    async def send_turn(self, text: str) -> ChatTurn:
        """Sends one user message and returns the assistant's reply turn."""
        if self.session is None:
            raise SessionNotInitialized()

        try:
            response = await self.session.send_message(text)
        except Exception as e:
            logger.error("Error sending message to Gemini chat: %s", e)
            raise self._translate(e)

        return make_turn(
            response_text(response) or CHAT_EMPTY_REPLY,
            Sender.BOT,
            extract_sources(response),
        )
