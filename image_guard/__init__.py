"""
Image upload guard plugin for a chat server.

Contains the upload gatekeeper plus the hooks, commands, storage and
background job the host calls into.
"""

from .models import (
    UploadCandidate,
    UploadDecision,
    UploadResult,
    CommandArgs,
    CommandResponse,
    ResponseType,
    HTTPResponse,
    PluginInfo,
)
from .gatekeeper import UploadGatekeeper, REJECTION_MESSAGE
from .configuration import Configuration, ConfigurationError, load_configuration
from .kvstore import KVStore, KVStoreError
from .command import CommandHandler
from .jobs import BackgroundJob, make_wait_for_rounded_interval
from .plugin import Plugin, PluginError, ActivationError, CommandError

__all__ = [
    'UploadCandidate',
    'UploadDecision',
    'UploadResult',
    'CommandArgs',
    'CommandResponse',
    'ResponseType',
    'HTTPResponse',
    'PluginInfo',
    'UploadGatekeeper',
    'REJECTION_MESSAGE',
    'Configuration',
    'ConfigurationError',
    'load_configuration',
    'KVStore',
    'KVStoreError',
    'CommandHandler',
    'BackgroundJob',
    'make_wait_for_rounded_interval',
    'Plugin',
    'PluginError',
    'ActivationError',
    'CommandError',
]
