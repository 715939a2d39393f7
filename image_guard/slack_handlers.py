"""
Slack wiring for the plugin.

Slack stores a file before any app sees it, so the upload filter runs on
the file_shared event: a rejected file is deleted and the uploader gets the
rejection message as an ephemeral reply.
"""

import logging

from slack_bolt import App
from slack_sdk.errors import SlackApiError

from .models import CommandArgs, ResponseType, UploadCandidate
from .plugin import Plugin, CommandError, PluginError

logger = logging.getLogger(__name__)


def create_command_handler(plugin: Plugin):
    """Factory to create the slash command handler."""

    def handler(ack, command, respond):
        ack()
        args = CommandArgs(
            command=f"{command.get('command', '')} {command.get('text', '')}".strip(),
            user_id=command.get("user_id", ""),
            channel_id=command.get("channel_id", ""),
        )

        try:
            response = plugin.execute_command(args)
        except CommandError as e:
            respond(
                text=f"An error occurred: {e}",
                response_type=ResponseType.EPHEMERAL.value
            )
            return

        respond(text=response.text, response_type=response.response_type.value)

    return handler


def create_file_shared_handler(plugin: Plugin):
    """Factory to create the file_shared event handler."""

    def handler(event, client):
        file_id = event.get("file_id")
        if not file_id:
            return

        try:
            info = client.files_info(file=file_id)["file"]
        except SlackApiError as e:
            logger.error(f"Failed to fetch file info for {file_id}: {e}")
            return

        candidate = UploadCandidate(
            name=info.get("name") or "",
            mime_type=info.get("mimetype") or ""
        )
        decision = plugin.file_will_be_uploaded(candidate)
        if decision.accepted:
            return

        try:
            client.files_delete(file=file_id)
        except SlackApiError as e:
            logger.error(f"Failed to delete rejected file {file_id}: {e}")

        channel_id = event.get("channel_id")
        user_id = event.get("user_id") or info.get("user")
        if not channel_id or not user_id:
            return

        try:
            client.chat_postEphemeral(
                channel=channel_id,
                user=user_id,
                text=decision.rejection_message
            )
        except SlackApiError as e:
            logger.error(f"Failed to notify {user_id} about rejected file: {e}")

    return handler


def register_handlers(app: App, plugin: Plugin) -> None:
    """Attach the plugin's command and event handlers to a Bolt app."""
    if plugin.command_handler is None:
        raise PluginError("plugin must be activated before registering handlers")

    for definition in plugin.command_handler.commands.values():
        app.command(definition.slash_command)(create_command_handler(plugin))

    app.event("file_shared")(create_file_shared_handler(plugin))

