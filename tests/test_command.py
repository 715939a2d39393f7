"""
tests/test_command.py

Tests for the /hello slash command stub.
"""

from image_guard.command import CommandHandler
from image_guard.models import CommandArgs, ResponseType


def run(command: str):
    return CommandHandler().handle(CommandArgs(command=command))


class TestHelloCommand:

    def test_registers_hello(self) -> None:
        handler = CommandHandler()
        assert handler.commands["hello"].slash_command == "/hello"
        assert handler.commands["hello"].hint == "[@username]"

    def test_greets_username(self) -> None:
        response = run("/hello alice")
        assert response.text == "Hello, alice"
        assert response.response_type is ResponseType.IN_CHANNEL

    def test_extra_words_are_ignored(self) -> None:
        assert run("/hello   bob and friends").text == "Hello, bob"

    def test_missing_username(self) -> None:
        response = run("/hello")
        assert response.text == "Please specify a username"
        assert response.response_type is ResponseType.EPHEMERAL


class TestUnknownCommand:

    def test_unknown_trigger(self) -> None:
        response = run("/goodbye alice")
        assert response.text == "Unknown command: /goodbye alice"
        assert response.response_type is ResponseType.EPHEMERAL

    def test_empty_command_line(self) -> None:
        response = run("")
        assert response.text == "Unknown command: "
        assert response.response_type is ResponseType.EPHEMERAL
