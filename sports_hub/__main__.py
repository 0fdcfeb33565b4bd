"""
Developer smoke run: loads the feed once and logs what Gemini returned.

Requires the GEMINI_KEY environment variable.
"""

import asyncio
import logging
import sys

from sports_hub.config import configure_logging, load_config
from sports_hub.hub import SportsHub

logger = logging.getLogger(__name__)


async def run() -> int:
    """Refreshes the feed once and logs a short report."""
    config = load_config()
    hub = SportsHub(config=config)
    state = await hub.start()

    if not state.is_credential_valid:
        logger.error("Error: %s", state.last_error)
        return 1
    if state.last_error:
        logger.warning("Loaded with degraded content: %s", state.last_error)

    logger.info("This Hour's Sports Roundup:\n%s", state.hourly_summary_text)
    for article in state.articles:
        logger.info("[%s] %s (%s)", article["category"].value, article["title"], article["source_name"])
    logger.info("%d global sources cited.", len(state.global_sources))
    return 0


def main() -> None:
    """Main execution entry point."""
    configure_logging(load_config().get("log_level", "INFO"))
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
