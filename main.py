"""
Image Upload Guard - Main Entry Point

Hosts the plugin in a Slack workspace:
- Activates the plugin (KV store, slash commands, background job)
- Filters shared files down to images
- Deactivates the plugin on shutdown
"""

import os
import sys
import json
import argparse
import logging
from pathlib import Path
from dotenv import load_dotenv

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler

from image_guard.configuration import ConfigurationError, load_configuration
from image_guard.plugin import Plugin, PluginError
from image_guard.slack_handlers import register_handlers

BOT_DIR = Path(__file__).parent

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Image Upload Guard")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to bot config JSON file (e.g., bots/image_guard.json)"
    )
    return parser.parse_args()


def load_environment(env_file: str | None = None):
    """Load and validate environment variables."""
    if env_file:
        env_path = BOT_DIR / env_file
    else:
        env_path = BOT_DIR / ".env"
    load_dotenv(env_path)

    required_vars = ["SLACK_BOT_TOKEN", "SLACK_APP_TOKEN"]
    missing = [var for var in required_vars if not os.getenv(var)]

    if missing:
        logger.error(
            f"Missing required environment variables: {', '.join(missing)}"
        )
        sys.exit(1)


def main():
    """Start the plugin host."""
    args = parse_args()
    config = None
    config_path = None

    if args.config:
        config_path = BOT_DIR / args.config
        try:
            with open(config_path) as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read bot config {config_path}: {e}")
            sys.exit(1)

        if not isinstance(config, dict):
            logger.error(f"Bot config {config_path} must contain a JSON object")
            sys.exit(1)
        logger.info(f"Loaded bot config: {config.get('name', args.config)}")

    load_environment(config.get("env_file") if config else None)

    try:
        configuration = load_configuration(config_path)
    except ConfigurationError as e:
        logger.error(f"Invalid plugin configuration: {e}")
        sys.exit(1)

    data_dir = BOT_DIR / config["data_dir"] if config and "data_dir" in config else None
    plugin = Plugin(configuration=configuration, data_dir=data_dir)

    try:
        plugin.on_activate()
    except PluginError as e:
        logger.error(f"Plugin activation failed: {e}")
        sys.exit(1)

    app = App(token=os.environ["SLACK_BOT_TOKEN"])
    register_handlers(app, plugin)

    handler = SocketModeHandler(app, os.environ["SLACK_APP_TOKEN"])

    logger.info("Plugin is running! Press Ctrl+C to stop.")
    try:
        handler.start()
    finally:
        plugin.on_deactivate()


if __name__ == "__main__":
    main()
