"""
tzbot - A Discord bot showing the current time of configured timezones in its nickname.
"""

import asyncio
import sys
from .main import main as async_main


def main() -> None:
    """Synchronous entry point that runs the async main function."""
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        import logging

        logger = logging.getLogger(__name__)
        logger.info("Bot stopped by user")
    except Exception as e:
        try:
            import logging

            logger = logging.getLogger(__name__)
            logger.exception(f"Failed to start bot: {e}")
        except Exception:  # noqa: BLE001
            print(f"Failed to start bot: {e}", file=sys.stderr)
        sys.exit(1)


__all__ = ["main"]
