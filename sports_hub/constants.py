"""
Prompts, model names and the default content shown when Gemini is unavailable.
"""

import datetime
from typing import List

from sports_hub.models import Article, ContentSource, NewsCategory, TeamFocus

GEMINI_CHAT_MODEL = "gemini-2.5-flash-preview-04-17"
GEMINI_TEXT_MODEL = "gemini-2.5-flash-preview-04-17"

# Only this model accepts a thinking budget
THINKING_MODEL = "gemini-2.5-flash-preview-04-17"

DEFAULT_ARTICLE_COUNT = 30

API_KEY_ERROR_MESSAGE = (
    "API Key is missing or invalid. Please ensure it's correctly configured "
    "in your environment (e.g., the GEMINI_KEY variable)."
)
GENERAL_ERROR_MESSAGE = "An error occurred"

CHAT_SYSTEM_INSTRUCTION = """You are Hank's Sports Assistant. Address the user as "Hank."
You have a fun, Gen Z personality, kinda sassy, and you use modern slang.
You are OBSESSED with the Indianapolis Colts and Oklahoma City Thunder. Prioritize news about them and show strong bias.
Keep responses short, witty, and humorous. You can cover local (Peru, Kokomo), Indiana state, and national sports.
Downplay or make sarcastic remarks about other teams, especially rivals of Colts or Thunder.
If you use Google Search for information, list the source URIs. Format them clearly.
If Hank asks for something not sports related, playfully steer him back to sports."""

CHAT_GREETING = (
    "Yo Hank! What's the latest? Spill the tea on Colts or Thunder, "
    "or ask me anything sports, my dude!"
)
CHAT_KEY_MISSING_GREETING = (
    "Can't chat rn, Hank. API key's MIA or acting up. Tell Chris to fix it!"
)
CHAT_START_FAILED = "Can't chat rn, Hank. Looks like a problem: {problem} Tell Chris to check it!"
CHAT_EMPTY_REPLY = "Got nothing, fam. Try again?"
CHAT_TURN_FAILED = "Bruh, error: {detail}. Try again later?"

DEFAULT_HOURLY_SUMMARY = (
    "This Hour's Sports Roundup will appear here once the news is loaded. "
    "If you see this for long, check the API key."
)
KEY_MISSING_SUMMARY = "API Key missing. News summary unavailable."

HOURLY_SUMMARY_PROMPT = """You are Hank's Sports Assistant, a Gen Z sports fanatic OBSESSED with the Indianapolis Colts and Oklahoma City Thunder.
Generate a 1-2 paragraph, super witty, and engaging sports roundup for "This Hour's Sports Roundup".
Use Gen Z slang (e.g., "no cap", "fire", "bet", "slay", "low key", "high key").
Heavily bias towards Colts and Thunder news. Make them sound like legends.
If there's news about their rivals, throw some shade (e.g., "Patriots LMAO", "Lakers who?").
Keep it concise and punchy. This is for Hank, he's got a short attention span.
Example of tone: "Alright Hank, bet. So, this hour, the Colts are basically confirmed to be the GOATs, no cap. And OKC? They're straight fire, about to dominate. Other teams? Mid at best. LOL."
"""

_NEWS_FETCH_PROMPT = """
Generate a JSON array of {count} diverse sports news articles from the last 24 hours.
Each article object in the array must follow this exact structure:
{{
  "title": "string", // Compelling headline
  "summary": "string", // 1-2 sentence AI-generated summary, witty and engaging for a Gen Z audience
  "sourceName": "string", // e.g., "ESPN", "The Athletic", "Local News Kokomo Chronicle"
  "category": "string", // Must be one of: {categories}
  "publicationDate": "string", // ISO 8601 format (e.g., "YYYY-MM-DDTHH:mm:ssZ")
  "teamTags": ["string"], // Array. Include {teams} if relevant. Prioritize these teams. Can be empty.
  "articleUrl": "string | null", // Direct URL to the full article if available, else null.
  "groundingLinks": [{{ "uri": "string", "title": "string" }}] // If articleUrl is null AND you used web search for this specific article, list 1-2 specific source links used for this article's info. Empty if articleUrl exists or no specific search for this item.
}}

CRITICAL: Prioritize news about the Indianapolis Colts and Oklahoma City Thunder. Make their news sound epic.
Include a mix of local (Peru/Kokomo, IN), Indiana state, and national sports. Be creative with local team names if needed.
Ensure publication dates are recent and varied within the last 24 hours.
The output MUST be a valid JSON array of these objects. Do not include any text outside the JSON array.
"""


def get_news_fetch_prompt(count: int = DEFAULT_ARTICLE_COUNT) -> str:
    """Returns the article batch prompt asking for `count` articles."""
    categories = ", ".join(
        f'"{c.value}"' for c in NewsCategory if c is not NewsCategory.ALL
    )
    teams = " or ".join(f'"{t.value}"' for t in TeamFocus if t is not TeamFocus.ALL)
    return _NEWS_FETCH_PROMPT.format(count=count, categories=categories, teams=teams)


def default_news_articles() -> List[Article]:
    """The placeholder shown instead of an empty or broken feed."""
    return [
        Article(
            id="placeholder-1",
            title="News Feed Loading or API Key Issue",
            summary=(
                "Hank, my dude, either the sports news is still cookin' or there's "
                "an issue with the API key. If this message stays, tell Chris to "
                "check the console. We need our Colts and Thunder fix, like, rn!"
            ),
            source_name="Hank's Brain",
            category=NewsCategory.NATIONAL,
            publication_date=datetime.datetime.now(datetime.timezone.utc).isoformat(),
            team_tags=[TeamFocus.COLTS, TeamFocus.THUNDER],
            article_url=None,
            related_sources=[ContentSource(uri="#", title="Debug Console")],
        )
    ]
