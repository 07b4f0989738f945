"""ngrok bot - CLI entry point."""

import sys
from pathlib import Path

import click
from telegram import Update

from . import __version__
from .bot.app import build_application
from .bot.dispatcher import CommandDispatcher
from .common.exceptions import ConfigurationError
from .common.logging import get_logger, setup_logging
from .config import DEFAULT_CONFIG_PATH, load_config

logger = get_logger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="ngrok-bot")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file",
)
@click.option(
    "--bot-key",
    default=None,
    help="Telegram bot token (overrides config file and NGROK_BOT_KEY)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.option("--json-logs", is_flag=True, help="Output logs as JSON")
@click.option("--log-file", default=None, help="Also write logs to this file")
def main(
    config_file: Path,
    bot_key: str | None,
    log_level: str,
    json_logs: bool,
    log_file: str | None,
) -> None:
    """Telegram bot exposing local services through ngrok on demand."""
    setup_logging(level=log_level, json_format=json_logs, log_file=log_file)
    logger.info("Starting bot...")

    try:
        config = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("Error: ", fg="red", bold=True) + str(e), err=True)
        sys.exit(1)

    if bot_key:
        config = config.model_copy(update={"bot_key": bot_key})

    logger.info(
        "Configuration",
        bot_key=config.bot_key,
        binary=config.ngrok.binary,
        api_url=config.ngrok.api_url,
    )

    dispatcher = CommandDispatcher.from_config(config)
    application = build_application(config, dispatcher)

    logger.info("Bot is ready!")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
