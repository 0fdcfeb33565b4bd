"""Gemini-backed sports news feed and chat assistant core."""

from sports_hub.hub import Conversation, SportsHub

__all__ = ["Conversation", "SportsHub"]
