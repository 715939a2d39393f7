"""
Plugin object exposed to the chat host.

Handles:
- Activation and deactivation (KV store, commands, background job)
- Slash command execution
- Upload filtering before files are stored
- The plugin's HTTP routes
- Configuration reloads
"""

import logging
import threading
from datetime import timedelta
from pathlib import Path
from typing import Optional

from .command import CommandHandler
from .configuration import Configuration, load_configuration
from .gatekeeper import UploadGatekeeper
from .jobs import BackgroundJob, make_wait_for_rounded_interval
from .kvstore import KVStore, KVStoreError
from .models import (
    CommandArgs,
    CommandResponse,
    HTTPResponse,
    PluginInfo,
    UploadCandidate,
    UploadDecision,
)

logger = logging.getLogger(__name__)

PLUGIN_INFO = PluginInfo(
    plugin_id="com.example.image-guard",
    display_name="Image Upload Guard",
    description="Only lets image files (PNG, JPG, JPEG, SVG) be uploaded",
)

JOB_NAME = "BackgroundJob"
JOB_INTERVAL = timedelta(hours=1)

API_PREFIX = "/api/v1"
USER_ID_HEADER = "X-User-ID"


class PluginError(Exception):
    """Base exception for plugin hook failures."""
    pass


class ActivationError(PluginError):
    """The plugin could not be activated."""
    pass


class CommandError(PluginError):
    """A slash command failed to execute."""
    pass


class Plugin:
    """Implements the hooks the host calls into."""

    def __init__(
        self,
        configuration: Optional[Configuration] = None,
        data_dir: Path | None = None,
        job_interval: timedelta = JOB_INTERVAL
    ):
        self.data_dir = data_dir
        self.job_interval = job_interval

        self.kvstore: Optional[KVStore] = None
        self.command_handler: Optional[CommandHandler] = None
        self.background_job: Optional[BackgroundJob] = None

        # Guards the (configuration, gatekeeper) snapshot
        self._configuration_lock = threading.Lock()
        self._snapshot = self._build_snapshot(configuration or Configuration())

    # -- configuration -------------------------------------------------------

    @staticmethod
    def _build_snapshot(configuration: Configuration) -> tuple[Configuration, UploadGatekeeper]:
        gatekeeper = UploadGatekeeper(
            configuration.allowed_mime_types,
            configuration.allowed_extensions
        )
        return configuration, gatekeeper

    def _get_snapshot(self) -> tuple[Configuration, UploadGatekeeper]:
        with self._configuration_lock:
            return self._snapshot

    def get_configuration(self) -> Configuration:
        """Return the active configuration."""
        return self._get_snapshot()[0]

    def set_configuration(self, configuration: Configuration) -> None:
        """Replace the active configuration and its gatekeeper as one unit."""
        snapshot = self._build_snapshot(configuration)
        with self._configuration_lock:
            self._snapshot = snapshot

    def on_configuration_change(self, config_path: Path | None = None) -> None:
        """Reload configuration. The old snapshot stays active on failure."""
        self.set_configuration(load_configuration(config_path))
        logger.info("Plugin configuration reloaded")

    # -- lifecycle -----------------------------------------------------------

    def on_activate(self) -> None:
        """
        Set up the plugin's collaborators.

        Raises:
            ActivationError: If the KV store cannot be opened or the background
                job cannot be scheduled
        """
        if self.background_job is not None:
            logger.warning(f"Plugin {PLUGIN_INFO.plugin_id} is already active")
            return

        try:
            self.kvstore = KVStore(self.data_dir)
        except (KVStoreError, OSError) as e:
            raise ActivationError(f"failed to open KV store: {e}") from e

        self.command_handler = CommandHandler()

        try:
            self.background_job = BackgroundJob.schedule(
                JOB_NAME,
                make_wait_for_rounded_interval(self.job_interval),
                self.run_job
            )
        except (RuntimeError, ValueError) as e:
            raise ActivationError(f"failed to schedule background job: {e}") from e

        logger.info(f"Activated plugin {PLUGIN_INFO.plugin_id}")

    def on_deactivate(self) -> None:
        """Stop the background job. Errors are logged, not raised."""
        if self.background_job is not None:
            try:
                self.background_job.close()
            except Exception as e:
                logger.error(f"Failed to close background job: {e}")
            self.background_job = None

        logger.info(f"Deactivated plugin {PLUGIN_INFO.plugin_id}")

    def run_job(self) -> None:
        """Body of the hourly background job."""
        logger.info("Job is currently running")

    # -- hooks ---------------------------------------------------------------

    def execute_command(self, args: CommandArgs) -> CommandResponse:
        """
        Execute a slash command registered by this plugin.

        Raises:
            CommandError: If the plugin is not active or the handler fails
        """
        if self.command_handler is None:
            raise CommandError("plugin is not activated")

        try:
            return self.command_handler.handle(args)
        except Exception as e:
            logger.exception(f"Failed to execute command {args.command!r}")
            raise CommandError(str(e)) from e

    def file_will_be_uploaded(self, candidate: UploadCandidate) -> UploadDecision:
        """Check an upload before the host stores it."""
        _, gatekeeper = self._get_snapshot()
        decision = gatekeeper.evaluate(candidate)

        if not decision.accepted:
            logger.info(
                f"Blocked upload of {candidate.name!r} "
                f"with MIME type {candidate.mime_type!r}"
            )

        return decision

    def serve_http(self, method: str, path: str, headers: dict[str, str]) -> HTTPResponse:
        """
        Route an HTTP request made to the plugin.

        Args:
            method: HTTP method
            path: Request path relative to the plugin's root
            headers: Request headers (names are case-insensitive)

        Returns:
            HTTPResponse with status code and plain-text body
        """
        routes = {
            f"{API_PREFIX}/hello": {"GET": self._hello_world},
        }

        if path.startswith(API_PREFIX + "/") or path == API_PREFIX:
            normalized = {k.lower(): v for k, v in headers.items()}
            if not normalized.get(USER_ID_HEADER.lower()):
                return HTTPResponse(status=401, body="Not authorized")

        handlers = routes.get(path)
        if handlers is None:
            return HTTPResponse(status=404, body="404 page not found")

        handler = handlers.get(method.upper())
        if handler is None:
            return HTTPResponse(status=405, body="Method not allowed")

        return handler()

    def _hello_world(self) -> HTTPResponse:
        return HTTPResponse(status=200, body="Hello, world!")
