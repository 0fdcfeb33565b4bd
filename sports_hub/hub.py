"""
Sports Hub facade.

SportsHub is what the UI talks to: it owns one credential gate, the content
fetchers and one conversation, and folds their outcomes into a FeedState the
news feed can render directly.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from google.genai import types

from sports_hub.config import load_config
from sports_hub.constants import (
    API_KEY_ERROR_MESSAGE,
    CHAT_GREETING,
    CHAT_KEY_MISSING_GREETING,
    CHAT_START_FAILED,
    CHAT_SYSTEM_INSTRUCTION,
    CHAT_TURN_FAILED,
    DEFAULT_HOURLY_SUMMARY,
    GENERAL_ERROR_MESSAGE,
    KEY_MISSING_SUMMARY,
    default_news_articles,
)
from sports_hub.models import (
    ArticleBatch,
    ChatTurn,
    CredentialInvalid,
    DegradedDefault,
    FeedState,
    FetchOutcome,
    RoundupPayload,
    Sender,
)
from sports_hub.services.chat import ChatSessionManager, make_turn
from sports_hub.services.content import ContentService
from sports_hub.services.credentials import CredentialGate
from sports_hub.services.errors import (
    CredentialMissingOrInvalid,
    SessionNotInitialized,
)

logger = logging.getLogger(__name__)


def default_chat_tools() -> List[types.Tool]:
    """The assistant answers with Google Search grounding."""
    return [types.Tool(google_search=types.GoogleSearch())]


class Conversation:
    """An append-only list of chat turns backed by one chat session."""

    def __init__(
        self,
        manager: ChatSessionManager,
        model: str,
        system_instruction: str = CHAT_SYSTEM_INSTRUCTION,
        tools: Optional[Sequence[Any]] = None,
        thinking_config: Optional[Any] = None,
    ):
        self.manager = manager
        self.model = model
        self.system_instruction = system_instruction
        self.tools = default_chat_tools() if tools is None else list(tools)
        self.thinking_config = (
            types.ThinkingConfig(thinking_budget=0)
            if thinking_config is None
            else thinking_config
        )
        self.turns: List[ChatTurn] = []
        self.last_error: Optional[str] = None
        self.start_error: Optional[str] = None

    def start(self, credential_valid: bool = True) -> None:
        """Creates the chat session and posts the opening bot turn."""
        if self.manager.is_active:
            self.last_error = None
            return
        if self.turns:
            # Only one greeting per conversation
            return

        if not credential_valid:
            self.last_error = API_KEY_ERROR_MESSAGE
            self.start_error = self.last_error
            self.turns.append(make_turn(CHAT_KEY_MISSING_GREETING, Sender.BOT))
            return

        try:
            self.manager.create_session(
                self.model, self.system_instruction, self.tools, self.thinking_config
            )
        except CredentialMissingOrInvalid:
            self.last_error = API_KEY_ERROR_MESSAGE
            self.start_error = self.last_error
            self.turns.append(
                make_turn(
                    CHAT_START_FAILED.format(problem="API Key might be acting up."),
                    Sender.BOT,
                )
            )
            return
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to initialize chat: %s", e)
            self.last_error = f"Failed to start chat: {e}"
            self.start_error = self.last_error
            self.turns.append(
                make_turn(
                    CHAT_START_FAILED.format(problem="Chat service isn't working."),
                    Sender.BOT,
                )
            )
            return

        self.start_error = None
        self.last_error = None
        self.turns.append(make_turn(CHAT_GREETING, Sender.BOT))

    async def send(self, text: str) -> Optional[ChatTurn]:
        """Appends the user's message and the bot's reply (or an error turn)."""
        if not text.strip():
            return None
        if not self.manager.is_active:
            self.last_error = (
                f"{self.start_error} Cannot send message."
                if self.start_error
                else str(SessionNotInitialized())
            )
            return None

        self.turns.append(make_turn(text, Sender.USER))
        self.last_error = None
        try:
            reply = await self.manager.send_turn(text)
        except CredentialMissingOrInvalid:
            self.last_error = API_KEY_ERROR_MESSAGE
            reply = make_turn(f"{API_KEY_ERROR_MESSAGE} Message failed.", Sender.BOT)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error sending message: %s", e)
            error_text = CHAT_TURN_FAILED.format(detail=str(e) or "Unknown issue")
            self.last_error = error_text
            reply = make_turn(error_text, Sender.BOT)

        self.turns.append(reply)
        return reply


class SportsHub:
    """
    Owns the Gemini credential, the feed content and the conversation.

    Overlapping refreshes are resolved by generation: only the most recently
    started refresh may write to the feed state.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        gate: Optional[CredentialGate] = None,
        content: Optional[ContentService] = None,
        chat: Optional[ChatSessionManager] = None,
    ):
        self.config = config if config is not None else load_config()
        self.gate = gate or CredentialGate()
        self.content = content or ContentService(
            self.gate,
            model=self.config["text_model"],
            article_count=self.config["article_count"],
        )
        self.chat = chat or ChatSessionManager(self.gate)
        self.conversation = Conversation(self.chat, model=self.config["chat_model"])
        self.state = FeedState()
        self._generation = 0

    def load_credential(self) -> bool:
        """Reads the API key from its source and activates it."""
        api_key = self.gate.credential_source()
        if not api_key:
            logger.warning(
                "API key is not set. Features requiring Gemini will be disabled."
            )
            self.gate.invalidate()
            self._mark_credential_invalid(KEY_MISSING_SUMMARY)
            return False

        self.gate.set_credential(api_key)
        if not self.gate.is_active:
            self._mark_credential_invalid(DEFAULT_HOURLY_SUMMARY)
            return False
        self.state.is_credential_valid = True
        return True

    def _mark_credential_invalid(self, summary: str) -> None:
        self.state.is_credential_valid = False
        self.state.last_error = API_KEY_ERROR_MESSAGE
        self.state.hourly_summary_text = summary
        self.state.articles = default_news_articles()
        self.state.global_sources = []
        self.state.is_loading = False

    async def start(self) -> FeedState:
        """Loads the credential, opens the conversation and fills the feed."""
        state = await self.refresh()
        self.conversation.start(credential_valid=state.is_credential_valid)
        return state

    async def refresh(self) -> FeedState:
        """Fetches the roundup and the articles concurrently and applies both."""
        self._generation += 1
        generation = self._generation

        if not self.load_credential():
            return self.state

        self.state.is_loading = True
        self.state.last_error = None
        roundup, batch = await asyncio.gather(
            self.content.fetch_roundup(), self.content.fetch_articles()
        )

        if generation != self._generation:
            logger.info("Discarding results of superseded refresh %d.", generation)
            return self.state

        self._apply(roundup, batch)
        self.state.is_loading = False
        return self.state

    def _apply(
        self,
        roundup: FetchOutcome[RoundupPayload],
        batch: FetchOutcome[ArticleBatch],
    ) -> None:
        if isinstance(roundup, CredentialInvalid) or isinstance(batch, CredentialInvalid):
            logger.error("Gemini rejected the API key.")
            self.gate.invalidate()
            self._mark_credential_invalid(DEFAULT_HOURLY_SUMMARY)
            return

        roundup_payload = roundup.unwrap()
        batch_payload = batch.unwrap()
        self.state.is_credential_valid = True
        self.state.hourly_summary_text = roundup_payload["text"]
        self.state.articles = batch_payload["articles"]
        self.state.global_sources = batch_payload["global_sources"]

        details = [
            outcome.detail
            for outcome in (roundup, batch)
            if isinstance(outcome, DegradedDefault)
        ]
        self.state.last_error = (
            f"{GENERAL_ERROR_MESSAGE}: {'; '.join(details)}" if details else None
        )
