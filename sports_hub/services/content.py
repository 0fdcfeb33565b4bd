"""
Content fetchers for the news feed.

This module provides the ContentService class, which asks Google Gemini (with
Google Search grounding) for the hourly sports roundup and for a batch of
structured news articles. Apart from credential problems, failures never
escape: they resolve to the default content instead.
"""

import datetime
import logging
import time
from typing import Any, Dict, List, Optional

from google.genai import types

from sports_hub.constants import (
    DEFAULT_ARTICLE_COUNT,
    DEFAULT_HOURLY_SUMMARY,
    GEMINI_TEXT_MODEL,
    HOURLY_SUMMARY_PROMPT,
    default_news_articles,
    get_news_fetch_prompt,
)
from sports_hub.models import (
    Article,
    ArticleBatch,
    ContentSource,
    CredentialInvalid,
    DegradedDefault,
    FetchOutcome,
    NewsCategory,
    RoundupPayload,
    Success,
    TeamFocus,
)
from sports_hub.services.credentials import CredentialGate
from sports_hub.services.errors import (
    CredentialMissingOrInvalid,
    CredentialPredicate,
    ErrorKind,
    ParseFailure,
    classify,
    is_invalid_credential_error,
)
from sports_hub.services.normalizer import (
    UNKNOWN_SOURCE,
    extract_sources,
    parse_json_response,
    response_text,
)

logger = logging.getLogger(__name__)

_CATEGORY_VALUES = {c.value for c in NewsCategory if c is not NewsCategory.ALL}
_TEAM_VALUES = {t.value for t in TeamFocus if t is not TeamFocus.ALL}


def _search_config() -> types.GenerateContentConfig:
    # response_mime_type cannot be combined with the search tool
    return types.GenerateContentConfig(
        tools=[types.Tool(google_search=types.GoogleSearch())]
    )


def _text(value: Any, default: Optional[str]) -> Optional[str]:
    """Returns `value` when it is a non-empty string, else `default`."""
    return value if isinstance(value, str) and value else default


def _map_related_sources(raw_links: Any) -> List[ContentSource]:
    if not isinstance(raw_links, list):
        return []
    return [
        ContentSource(uri=link["uri"], title=link["title"])
        for link in raw_links
        if isinstance(link, dict)
        and _text(link.get("uri"), None)
        and _text(link.get("title"), None)
    ]


def map_article(raw: Dict[str, Any], index: int) -> Article:
    """Maps one raw article object from Gemini onto an Article.

    Missing fields get placeholders, an unknown category becomes National, and
    team tags outside the tracked teams are dropped.
    """
    category = raw.get("category")
    raw_tags = raw.get("teamTags")
    team_tags = (
        [TeamFocus(tag) for tag in raw_tags if isinstance(tag, str) and tag in _TEAM_VALUES]
        if isinstance(raw_tags, list)
        else []
    )

    return Article(
        id=str(raw.get("id") or f"article-{int(time.time() * 1000)}-{index}"),
        title=_text(raw.get("title"), "Untitled Article"),
        summary=_text(raw.get("summary"), "No summary available."),
        source_name=_text(raw.get("sourceName"), UNKNOWN_SOURCE),
        category=(
            NewsCategory(category)
            if isinstance(category, str) and category in _CATEGORY_VALUES
            else NewsCategory.NATIONAL
        ),
        publication_date=_text(
            raw.get("publicationDate"),
            datetime.datetime.now(datetime.timezone.utc).isoformat(),
        ),
        team_tags=team_tags,
        article_url=_text(raw.get("articleUrl"), None),
        related_sources=_map_related_sources(raw.get("groundingLinks")),
    )


class ContentService:
    """
    Fetches the roundup text and article batch from Google Gemini.

    Both fetches return a FetchOutcome: Success with live content,
    DegradedDefault with the default content and the error detail, or
    CredentialInvalid when the API key is missing or rejected.
    """

    def __init__(
        self,
        gate: CredentialGate,
        model: str = GEMINI_TEXT_MODEL,
        article_count: int = DEFAULT_ARTICLE_COUNT,
        is_credential_error: CredentialPredicate = is_invalid_credential_error,
    ):
        self.gate = gate
        self.model = model
        self.article_count = article_count
        self.is_credential_error = is_credential_error

    def _credential_outcome(self, error: Exception) -> Optional[CredentialInvalid]:
        if classify(error, self.is_credential_error) is not ErrorKind.CREDENTIAL_INVALID:
            return None
        if not isinstance(error, CredentialMissingOrInvalid):
            converted = CredentialMissingOrInvalid()
            converted.__cause__ = error
            error = converted
        return CredentialInvalid(error)

    async def fetch_roundup(self) -> FetchOutcome[RoundupPayload]:
        """Asks Gemini for this hour's sports roundup."""
        logger.info("Fetching hourly roundup...")
        try:
            client = self.gate.get_active_client()
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=HOURLY_SUMMARY_PROMPT,
                config=_search_config(),
            )
            return Success(
                RoundupPayload(
                    text=response_text(response), sources=extract_sources(response)
                )
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error fetching hourly roundup from Gemini: %s", e)
            outcome = self._credential_outcome(e)
            if outcome is not None:
                return outcome
            detail = str(e) or "Unknown error fetching summary"
            return DegradedDefault(
                RoundupPayload(
                    text=f"{DEFAULT_HOURLY_SUMMARY} (Error: {detail})", sources=[]
                ),
                detail,
            )

    async def fetch_articles(self) -> FetchOutcome[ArticleBatch]:
        """Asks Gemini for a batch of structured news articles."""
        logger.info("Fetching %d news articles...", self.article_count)
        try:
            client = self.gate.get_active_client()
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=get_news_fetch_prompt(self.article_count),
                config=_search_config(),
            )
            text = response_text(response)
            parsed = parse_json_response(text)
            if not isinstance(parsed, list):
                logger.error(
                    "News reply is not a JSON array. Raw reply text: %s", text
                )
                raise ParseFailure(
                    "Could not parse news articles from AI response. "
                    "The format might be incorrect."
                )

            articles = [
                map_article(item, index)
                for index, item in enumerate(parsed)
                if isinstance(item, dict)
            ]
            if not articles:
                logger.error("News reply held no article objects: %s", text)
                raise ParseFailure("AI response contained no news articles.")
            logger.info("Received %d articles.", len(articles))
            return Success(
                ArticleBatch(articles=articles, global_sources=extract_sources(response))
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error fetching news articles from Gemini: %s", e)
            outcome = self._credential_outcome(e)
            if outcome is not None:
                return outcome
            return DegradedDefault(
                ArticleBatch(articles=default_news_articles(), global_sources=[]),
                str(e) or "Unknown error fetching articles",
            )
