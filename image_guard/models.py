"""
Data models shared between the plugin and its host.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum


class UploadResult(Enum):
    """Outcome of checking an upload."""
    ACCEPTED = "accepted"
    UNSUPPORTED_FILE_TYPE = "unsupported_file_type"


class ResponseType(Enum):
    """Visibility of a slash command reply."""
    EPHEMERAL = "ephemeral"
    IN_CHANNEL = "in_channel"


@dataclass(frozen=True)
class UploadCandidate:
    """
    Metadata of a file the host is about to store.

    Both fields come from the uploading client and are untrusted.
    """
    name: str
    mime_type: str


@dataclass(frozen=True)
class UploadDecision:
    """Pass/reject decision for an upload."""
    result: UploadResult
    file: Optional[UploadCandidate] = None
    rejection_message: str = ""

    @property
    def accepted(self) -> bool:
        return self.result is UploadResult.ACCEPTED

    @classmethod
    def accept(cls, candidate: UploadCandidate) -> "UploadDecision":
        return cls(result=UploadResult.ACCEPTED, file=candidate)

    @classmethod
    def reject(cls, message: str) -> "UploadDecision":
        return cls(result=UploadResult.UNSUPPORTED_FILE_TYPE, rejection_message=message)


@dataclass
class CommandArgs:
    """Arguments of a slash command invocation."""
    command: str
    user_id: str = ""
    channel_id: str = ""


@dataclass
class CommandResponse:
    """Reply to a slash command."""
    text: str
    response_type: ResponseType = ResponseType.IN_CHANNEL


@dataclass
class HTTPResponse:
    """Response returned by the plugin's HTTP handler."""
    status: int
    body: str


@dataclass
class PluginInfo:
    """Metadata about the plugin."""
    plugin_id: str
    display_name: str
    description: str
    version: str = "1.0.0"
