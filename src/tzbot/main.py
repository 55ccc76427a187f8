"""
Main entry point for the timezone bot.

This module sets up logging, loads configuration, wires the settings store,
refresh registry, command router, connection supervisor and event
dispatcher around the Discord client, and manages the bot lifecycle until
shutdown is requested or the connection is given up.
"""

import asyncio
import logging
import logging.handlers
import signal
import sys
from datetime import datetime
from pathlib import Path

from .bot.commands import CommandRouter, OverviewCooldown
from .bot.connection import ConnectionSupervisor, RetryPolicy
from .bot.discord_client import DiscordChatClient
from .bot.events import EventDispatcher
from .bot.platform import ChatClient
from .bot.refresh import RefreshRegistry
from .config.manager import ConfigManager
from .config.schema import TimezoneBotConfig
from .storage import ConfigStore, JsonFileStore, KeyValueStore
from .utils.cli.args import ParsedArgs, get_parsed_args

LOG_FILES = ["tzbot.log", "tzbot-errors.log"]


def rotate_logs_on_startup(logs_dir: Path) -> None:
    """
    Rotate existing log files on startup with timestamp-based naming.

    Args:
        logs_dir: Directory containing log files
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    for log_file in LOG_FILES:
        log_path = logs_dir / log_file
        if log_path.exists():
            backup_path = logs_dir / f"{log_file}.{timestamp}"
            try:
                _ = log_path.rename(backup_path)
                print(f"Rotated {log_file} to {backup_path.name}")
            except Exception as e:
                print(f"Warning: Failed to rotate {log_file}: {e}")


def cleanup_old_logs(logs_dir: Path, max_files: int = 10) -> None:
    """
    Clean up old timestamped log files, keeping only the most recent ones.

    Args:
        logs_dir: Directory containing log files
        max_files: Maximum number of timestamped log files to keep per type
    """
    for log_type in LOG_FILES:
        timestamped_files = [
            file_path
            for file_path in logs_dir.glob(f"{log_type}.*")
            if file_path.name != log_type
        ]

        # Newest first
        timestamped_files.sort(key=lambda x: x.stat().st_mtime, reverse=True)

        for file_path in timestamped_files[max_files:]:
            try:
                file_path.unlink()
                print(f"Cleaned up old log file: {file_path.name}")
            except Exception as e:
                print(f"Warning: Failed to remove {file_path.name}: {e}")


def setup_logging(logs_dir: Path) -> None:
    """
    Configure logging with rotation and multiple handlers.

    Sets up a detailed debug log file, an error-only log file and console
    output, rotating previous logs on startup.

    Args:
        logs_dir: Directory receiving the log files
    """
    _ = logs_dir.mkdir(exist_ok=True, parents=True)

    rotate_logs_on_startup(logs_dir)
    cleanup_old_logs(logs_dir, max_files=10)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    )
    simple_formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    file_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "tzbot.log",
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(simple_formatter)

    error_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "tzbot-errors.log",
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(error_handler)

    # Quieter third-party loggers
    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("discord.http").setLevel(logging.WARNING)
    logging.getLogger("discord.gateway").setLevel(logging.INFO)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.getLogger("tzbot").setLevel(logging.INFO)


logger = logging.getLogger(__name__)


class TimezoneBot:
    """
    Timezone bot application.

    Owns every runtime component and their wiring: one settings store, one
    refresh registry, one command router, one connection supervisor and the
    event dispatcher feeding them from the chat client.
    """

    def __init__(
        self,
        config: TimezoneBotConfig,
        data_folder: Path,
        client: ChatClient | None = None,
        kv_store: KeyValueStore | None = None,
    ) -> None:
        """
        Initialize the bot and wire its components.

        Args:
            config: Validated bot configuration
            data_folder: Folder holding persisted guild settings
            client: Chat client, defaults to a ``DiscordChatClient``
            kv_store: Key-value store, defaults to JSON files under ``data_folder``
        """
        self.config: TimezoneBotConfig = config
        self.client: ChatClient = client or DiscordChatClient(config.services.discord.token)
        self.store: ConfigStore = ConfigStore(kv_store or JsonFileStore(data_folder / "guilds"))
        self.registry: RefreshRegistry = RefreshRegistry(
            self.client,
            self.store,
            interval=config.refresh.interval_seconds,
        )
        self.router: CommandRouter = CommandRouter(
            self.store,
            self.client,
            cooldown=OverviewCooldown(config.commands.overview_cooldown_seconds),
        )
        self.supervisor: ConnectionSupervisor = ConnectionSupervisor(
            self.client,
            self.registry,
            reconnect=config.connection.reconnect,
            retry_policy=RetryPolicy.from_config(config.connection),
        )
        self.dispatcher: EventDispatcher = EventDispatcher(
            self.router, self.registry, self.supervisor
        )

        set_event_sink = getattr(self.client, "set_event_sink", None)
        if callable(set_event_sink):
            _ = set_event_sink(self.dispatcher.publish)

        self._shutdown_event: asyncio.Event = asyncio.Event()
        self._is_shutting_down: bool = False

    def is_shutting_down(self) -> bool:
        """Check if the bot is in the process of shutting down."""
        return self._is_shutting_down

    def request_shutdown(self) -> None:
        """Ask ``run()`` to return."""
        self._shutdown_event.set()

    async def run(self) -> bool:
        """
        Connect and serve until shutdown is requested or the supervisor gives up.

        Returns:
            True if the bot stopped because shutdown was requested, False if
            the connection was given up
        """
        self.dispatcher.start()

        connect_task = asyncio.create_task(self.supervisor.connect(), name="initial-connect")
        terminated = asyncio.create_task(self.supervisor.wait_until_terminated())
        shutdown = asyncio.create_task(self._shutdown_event.wait())

        done, pending = await asyncio.wait(
            {terminated, shutdown}, return_when=asyncio.FIRST_COMPLETED
        )

        for task in (*pending, connect_task):
            if not task.done():
                _ = task.cancel()
        _ = await asyncio.gather(connect_task, *pending, return_exceptions=True)

        if shutdown in done:
            logger.info("Shutdown requested")
            return True
        return False

    async def close(self) -> None:
        """Stop all refresh tasks, the dispatcher and the client connection."""
        if self._is_shutting_down:
            logger.debug("Shutdown already in progress, skipping duplicate close")
            return

        self._is_shutting_down = True
        self._shutdown_event.set()
        logger.info("Initiating graceful shutdown of the timezone bot...")

        try:
            stopped = await self.registry.stop_all()
            logger.info(f"Stopped {stopped} refresh task(s)")
        except Exception as e:
            logger.error(f"Error stopping refresh tasks: {e}")

        try:
            await self.dispatcher.stop()
        except Exception as e:
            logger.error(f"Error stopping event dispatcher: {e}")

        try:
            await self.client.close()
        except Exception as e:
            logger.exception(f"Failed to close Discord connection: {e}")

        logger.info("Timezone bot shutdown complete")


def setup_signal_handlers(bot: TimezoneBot) -> None:
    """
    Setup signal handlers for graceful shutdown.

    Handles SIGTERM and SIGINT so the bot stops its tasks and closes the
    connection before the process exits.
    """
    loop = asyncio.get_running_loop()

    def signal_handler(signum: int, _frame: object) -> None:
        """Handle shutdown signals."""
        signal_name = signal.Signals(signum).name
        logger.info(f"Received {signal_name} signal, initiating graceful shutdown...")

        if loop.is_running():
            _ = loop.call_soon_threadsafe(bot.request_shutdown)
        else:
            logger.warning("Event loop not running, forcing immediate shutdown")
            sys.exit(1)

    _ = signal.signal(signal.SIGTERM, signal_handler)
    _ = signal.signal(signal.SIGINT, signal_handler)

    logger.debug("Signal handlers registered for graceful shutdown")


async def main() -> None:
    """
    Main entry point for the timezone bot application.

    Sets up paths and logging, loads configuration, creates the bot,
    installs signal handlers and runs until shutdown. Exits with status 1
    when the configuration is missing or invalid, or when the connection
    is given up.
    """
    parsed_args: ParsedArgs = get_parsed_args()

    setup_logging(parsed_args.log_folder)
    logger.info("Timezone bot starting up...")

    bot: TimezoneBot | None = None
    clean_exit = True

    try:
        config_path = parsed_args.config_file

        if not config_path.exists():
            sample_path = config_path.with_name("config.yml.sample")
            logger.error(f"Configuration file '{config_path}' not found")
            try:
                ConfigManager.create_sample_config(sample_path)
                logger.error(f"A sample configuration was written to '{sample_path}'")
            except OSError as e:
                logger.error(f"Could not write sample configuration: {e}")
            logger.error("Copy the sample to 'config.yml' and set your Discord bot token")
            sys.exit(1)

        try:
            config = ConfigManager.load_config(config_path)
            logger.info("Configuration loaded and validated successfully")
        except Exception as e:
            logger.exception(f"Failed to load configuration: {e}")
            logger.error("Please check your config.yml file for errors")
            sys.exit(1)

        bot = TimezoneBot(config, parsed_args.data_folder)
        setup_signal_handlers(bot)

        logger.info("Starting timezone bot...")
        clean_exit = await bot.run()

    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except SystemExit:
        raise
    except Exception as e:
        logger.exception(f"Fatal error in main: {e}")
        sys.exit(1)
    finally:
        if bot is not None and not bot.is_shutting_down():
            try:
                await bot.close()
            except Exception as e:
                logger.exception(f"Error during final bot cleanup: {e}")

    if not clean_exit:
        logger.error("Connection to Discord was given up, exiting")
        sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
