"""
Upload gatekeeper.

Decides from a file's declared MIME type and name whether an upload may be
stored. A file passes when EITHER its MIME type is allowed OR its lowercased
name ends with an allowed extension. File bytes are never inspected, so a
renamed non-image with an allowed extension passes; callers that need
content-based validation must add it themselves.
"""

import logging
from typing import Iterable

from .models import UploadCandidate, UploadDecision

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_MIME_TYPES = frozenset({
    "image/png",
    "image/jpeg",
    "image/svg+xml",
})

DEFAULT_ALLOWED_EXTENSIONS = frozenset({
    ".png",
    ".jpg",
    ".jpeg",
    ".svg",
})

# "Only PNG, JPG, JPEG, SVG image files may be uploaded."
REJECTION_MESSAGE = "只允許上傳 PNG, JPG, JPEG, SVG 格式的圖片檔案。"


class UploadGatekeeper:
    """Stateless pass/reject check over upload metadata."""

    def __init__(
        self,
        allowed_mime_types: Iterable[str] = DEFAULT_ALLOWED_MIME_TYPES,
        allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS
    ):
        self.allowed_mime_types = frozenset(allowed_mime_types)
        # str.endswith accepts a tuple of suffixes
        self._extensions = tuple(sorted(allowed_extensions))
        self.allowed_extensions = frozenset(self._extensions)

    def is_allowed_mime_type(self, mime_type: str) -> bool:
        """Exact, case-sensitive membership test."""
        return mime_type in self.allowed_mime_types

    def has_allowed_extension(self, name: str) -> bool:
        """Case-insensitive suffix test against the allowed extensions."""
        return name.lower().endswith(self._extensions)

    def evaluate(self, candidate: UploadCandidate) -> UploadDecision:
        """
        Decide whether a candidate may be stored.

        Args:
            candidate: Name and declared MIME type of the upload

        Returns:
            UploadDecision carrying the unchanged candidate when accepted,
            or the fixed rejection message when both checks fail
        """
        mime_ok = self.is_allowed_mime_type(candidate.mime_type)
        ext_ok = self.has_allowed_extension(candidate.name)

        if not mime_ok and not ext_ok:
            logger.debug(
                f"Rejected upload {candidate.name!r} ({candidate.mime_type!r})"
            )
            return UploadDecision.reject(REJECTION_MESSAGE)

        return UploadDecision.accept(candidate)
