"""
Data models for the Sports Hub application.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, NamedTuple, Optional, TypedDict, TypeVar, Union


class NewsCategory(str, Enum):
    """Regions an article can be filed under."""

    ALL = "All Categories"  # Filter only, never assigned to an article
    PERU_IN = "Peru, Indiana Sports"
    KOKOMO_IN = "Kokomo, Indiana Sports"
    INDIANA_STATE = "Indiana State Sports"
    NATIONAL = "National Sports News"


class TeamFocus(str, Enum):
    """Teams the feed tracks."""

    ALL = "All Teams"  # Filter only
    COLTS = "Indianapolis Colts"
    THUNDER = "Oklahoma City Thunder"


class Sender(str, Enum):
    """Author of a chat turn."""

    USER = "user"
    BOT = "bot"


class ContentSource(NamedTuple):
    """A citation reported by Gemini. Immutable."""

    uri: str
    title: str


class Article(TypedDict):
    """Type definition for a news article."""

    id: str
    title: str
    summary: str
    source_name: str
    category: NewsCategory
    publication_date: str  # ISO 8601
    team_tags: List[TeamFocus]
    article_url: Optional[str]
    related_sources: List[ContentSource]


class ChatTurn(TypedDict, total=False):
    """Type definition for one message in a conversation."""

    id: str
    text: str
    sender: Sender
    timestamp: str
    sources: List[ContentSource]


class RoundupPayload(TypedDict):
    """Hourly roundup text and the sources Gemini cited for it."""

    text: str
    sources: List[ContentSource]


class ArticleBatch(TypedDict):
    """A batch of articles plus the sources cited for the whole batch."""

    articles: List[Article]
    global_sources: List[ContentSource]


T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Live content was produced."""

    payload: T

    def unwrap(self) -> T:
        """Returns the payload."""
        return self.payload


@dataclass(frozen=True)
class DegradedDefault(Generic[T]):
    """Live content failed; the payload is the default content."""

    payload: T
    detail: str

    def unwrap(self) -> T:
        """Returns the default payload."""
        return self.payload


@dataclass(frozen=True)
class CredentialInvalid:
    """The API key is missing or rejected. No payload is available."""

    error: Exception

    def unwrap(self):
        """Raises the carried credential error."""
        raise self.error


FetchOutcome = Union[Success[T], DegradedDefault[T], CredentialInvalid]


@dataclass
class FeedState:
    """Everything the news feed view renders."""

    hourly_summary_text: str = ""
    articles: List[Article] = field(default_factory=list)
    global_sources: List[ContentSource] = field(default_factory=list)
    is_credential_valid: bool = True
    last_error: Optional[str] = None
    is_loading: bool = False
