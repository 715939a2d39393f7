"""
Slash command registration and execution.
"""

import logging
from dataclasses import dataclass

from .models import CommandArgs, CommandResponse, ResponseType

logger = logging.getLogger(__name__)

HELLO_COMMAND_TRIGGER = "hello"


@dataclass(frozen=True)
class CommandDefinition:
    """A slash command the plugin registers with the host."""
    trigger: str
    description: str
    hint: str = ""

    @property
    def slash_command(self) -> str:
        return f"/{self.trigger}"


class CommandHandler:
    """Executes the plugin's slash commands."""

    def __init__(self):
        self.commands = {
            HELLO_COMMAND_TRIGGER: CommandDefinition(
                trigger=HELLO_COMMAND_TRIGGER,
                description="Say hello to someone",
                hint="[@username]",
            ),
        }
        for definition in self.commands.values():
            logger.info(f"Registered slash command: {definition.slash_command}")

    def handle(self, args: CommandArgs) -> CommandResponse:
        """
        Execute a slash command.

        Args:
            args: Invocation with the full command line, e.g. "/hello alice"

        Returns:
            CommandResponse to show to the user
        """
        fields = args.command.split()
        trigger = fields[0].removeprefix("/") if fields else ""

        if trigger == HELLO_COMMAND_TRIGGER:
            return self._execute_hello(fields)

        return CommandResponse(
            text=f"Unknown command: {args.command}",
            response_type=ResponseType.EPHEMERAL
        )

    def _execute_hello(self, fields: list[str]) -> CommandResponse:
        if len(fields) < 2:
            return CommandResponse(
                text="Please specify a username",
                response_type=ResponseType.EPHEMERAL
            )

        return CommandResponse(text=f"Hello, {fields[1]}")
