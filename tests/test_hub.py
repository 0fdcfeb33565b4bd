"""Unit tests for the Sports Hub facade."""

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from sports_hub.constants import (
    API_KEY_ERROR_MESSAGE,
    CHAT_GREETING,
    CHAT_KEY_MISSING_GREETING,
    DEFAULT_HOURLY_SUMMARY,
    KEY_MISSING_SUMMARY,
)
from sports_hub.hub import Conversation, SportsHub
from sports_hub.models import (
    ArticleBatch,
    ContentSource,
    CredentialInvalid,
    DegradedDefault,
    NewsCategory,
    RoundupPayload,
    Sender,
    Success,
)
from sports_hub.services.chat import ChatSessionManager, make_turn
from sports_hub.services.credentials import CredentialGate
from sports_hub.services.errors import CredentialMissingOrInvalid, SessionNotInitialized

CONFIG = {"text_model": "m", "chat_model": "m", "article_count": 5, "log_level": "INFO"}

ARTICLE = {
    "id": "a1",
    "title": "Colts clinch",
    "summary": "W.",
    "source_name": "ESPN",
    "category": NewsCategory.NATIONAL,
    "publication_date": "2026-10-18T20:00:00Z",
    "team_tags": [],
    "article_url": None,
    "related_sources": [],
}


def roundup_success(text="Roundup"):
    return Success(RoundupPayload(text=text, sources=[ContentSource("https://a.com", "A")]))


def batch_success():
    return Success(
        ArticleBatch(articles=[ARTICLE], global_sources=[ContentSource("https://b.com", "B")])
    )


@patch("sports_hub.services.credentials.genai.Client")
class TestSportsHubRefresh(unittest.IsolatedAsyncioTestCase):
    def make_hub(self, api_key="key"):
        gate = CredentialGate(credential_source=lambda: api_key)
        content = MagicMock()
        content.fetch_roundup = AsyncMock(return_value=roundup_success())
        content.fetch_articles = AsyncMock(return_value=batch_success())
        return SportsHub(config=CONFIG, gate=gate, content=content)

    async def test_success(self, _):
        hub = self.make_hub()
        state = await hub.refresh()

        self.assertTrue(state.is_credential_valid)
        self.assertIsNone(state.last_error)
        self.assertFalse(state.is_loading)
        self.assertEqual(state.hourly_summary_text, "Roundup")
        self.assertEqual(state.articles, [ARTICLE])
        self.assertEqual(state.global_sources, [ContentSource("https://b.com", "B")])

    async def test_missing_key(self, _):
        hub = self.make_hub(api_key=None)
        state = await hub.refresh()

        self.assertFalse(state.is_credential_valid)
        self.assertEqual(state.last_error, API_KEY_ERROR_MESSAGE)
        self.assertEqual(state.hourly_summary_text, KEY_MISSING_SUMMARY)
        hub.content.fetch_roundup.assert_not_awaited()

    async def test_credential_rejected(self, _):
        hub = self.make_hub()
        hub.content.fetch_articles.return_value = CredentialInvalid(CredentialMissingOrInvalid())
        state = await hub.refresh()

        self.assertFalse(state.is_credential_valid)
        self.assertEqual(state.last_error, API_KEY_ERROR_MESSAGE)
        self.assertEqual(state.hourly_summary_text, DEFAULT_HOURLY_SUMMARY)
        self.assertEqual(state.articles[0]["id"], "placeholder-1")
        self.assertFalse(hub.gate.is_active)

    async def test_degraded_content_sets_error(self, _):
        hub = self.make_hub()
        hub.content.fetch_roundup.return_value = DegradedDefault(
            RoundupPayload(text="default roundup", sources=[]), "rate limited"
        )
        state = await hub.refresh()

        self.assertTrue(state.is_credential_valid)
        self.assertEqual(state.hourly_summary_text, "default roundup")
        self.assertEqual(state.articles, [ARTICLE])
        self.assertEqual(state.last_error, "An error occurred: rate limited")

    async def test_latest_refresh_wins(self, _):
        hub = self.make_hub()
        first_started = asyncio.Event()
        release_first = asyncio.Event()
        calls = []

        async def fetch_roundup():
            calls.append(1)
            if len(calls) == 1:
                first_started.set()
                await release_first.wait()
                return roundup_success("stale")
            return roundup_success("fresh")

        hub.content.fetch_roundup = fetch_roundup

        first = asyncio.create_task(hub.refresh())
        await first_started.wait()
        await hub.refresh()
        release_first.set()
        await first

        self.assertEqual(hub.state.hourly_summary_text, "fresh")
        self.assertFalse(hub.state.is_loading)

    async def test_start_greets(self, _):
        hub = self.make_hub()
        hub.chat = ChatSessionManager(hub.gate)
        hub.conversation = Conversation(hub.chat, model="m")
        await hub.start()

        self.assertEqual(len(hub.conversation.turns), 1)
        self.assertEqual(hub.conversation.turns[0]["text"], CHAT_GREETING)

    async def test_start_without_key(self, _):
        hub = self.make_hub(api_key=None)
        await hub.start()

        self.assertEqual(hub.conversation.turns[0]["text"], CHAT_KEY_MISSING_GREETING)
        self.assertEqual(hub.conversation.last_error, API_KEY_ERROR_MESSAGE)


class TestConversation(unittest.IsolatedAsyncioTestCase):
    def make_conversation(self):
        manager = MagicMock(spec=ChatSessionManager)
        manager.is_active = True
        manager.send_turn = AsyncMock(return_value=make_turn("Colts!", Sender.BOT, []))
        return Conversation(manager, model="m"), manager

    async def test_send_appends_both_turns(self):
        conversation, manager = self.make_conversation()
        reply = await conversation.send("Who's the GOAT?")

        self.assertEqual(reply["text"], "Colts!")
        self.assertEqual(
            [(t["sender"], t["text"]) for t in conversation.turns],
            [(Sender.USER, "Who's the GOAT?"), (Sender.BOT, "Colts!")],
        )
        manager.send_turn.assert_awaited_once_with("Who's the GOAT?")

    async def test_failed_turn_appends_error_turn(self):
        conversation, manager = self.make_conversation()
        manager.send_turn.side_effect = [RuntimeError("overloaded"), make_turn("ok", Sender.BOT)]

        error_turn = await conversation.send("first")
        self.assertEqual(error_turn["sender"], Sender.BOT)
        self.assertIn("overloaded", error_turn["text"])

        reply = await conversation.send("second")
        self.assertEqual(reply["text"], "ok")
        self.assertEqual(len(conversation.turns), 4)
        self.assertIsNone(conversation.last_error)

    async def test_credential_failure_turn(self):
        conversation, manager = self.make_conversation()
        manager.send_turn.side_effect = CredentialMissingOrInvalid()
        turn = await conversation.send("hi")
        self.assertEqual(turn["text"], f"{API_KEY_ERROR_MESSAGE} Message failed.")
        self.assertEqual(conversation.last_error, API_KEY_ERROR_MESSAGE)

    async def test_blank_message_ignored(self):
        conversation, manager = self.make_conversation()
        self.assertIsNone(await conversation.send("   "))
        self.assertEqual(conversation.turns, [])
        manager.send_turn.assert_not_awaited()

    async def test_inactive_session(self):
        conversation, manager = self.make_conversation()
        manager.is_active = False
        self.assertIsNone(await conversation.send("hi"))
        self.assertEqual(conversation.turns, [])
        self.assertIn("Cannot send message", conversation.last_error)

    def test_start_failure_message(self):
        manager = MagicMock(spec=ChatSessionManager)
        manager.is_active = False
        manager.create_session.side_effect = RuntimeError("boom")
        conversation = Conversation(manager, model="m")

        conversation.start()

        self.assertEqual(len(conversation.turns), 1)
        self.assertIn("Chat service isn't working.", conversation.turns[0]["text"])
        self.assertEqual(conversation.last_error, "Failed to start chat: boom")

    async def test_send_after_failed_start_reports_start_error(self):
        manager = MagicMock(spec=ChatSessionManager)
        manager.is_active = False
        manager.create_session.side_effect = RuntimeError("boom")
        conversation = Conversation(manager, model="m")
        conversation.start()

        self.assertIsNone(await conversation.send("hi"))
        self.assertEqual(
            conversation.last_error, "Failed to start chat: boom Cannot send message."
        )
        self.assertNotIn(API_KEY_ERROR_MESSAGE, conversation.last_error)

    async def test_send_after_key_failure_blames_key(self):
        manager = MagicMock(spec=ChatSessionManager)
        manager.is_active = False
        conversation = Conversation(manager, model="m")
        conversation.start(credential_valid=False)

        await conversation.send("hi")
        self.assertEqual(
            conversation.last_error, f"{API_KEY_ERROR_MESSAGE} Cannot send message."
        )

    async def test_send_before_start(self):
        conversation, manager = self.make_conversation()
        manager.is_active = False
        await conversation.send("hi")
        self.assertEqual(conversation.last_error, str(SessionNotInitialized()))


if __name__ == "__main__":
    unittest.main()
