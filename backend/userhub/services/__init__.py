"""
Services Module

- credential_store: User persistence, password hashing, refresh-token slot
- sessions: login / logout / refresh rotation / password change
- profiles: registration, account and media updates, channel profile
- media: attachment manager over an injected media host (Cloudinary)
"""

from .media_base import (
    LocalFile,
    MediaHost,
    MediaHostError,
    UploadedMedia,
    extract_public_id,
)
from .media import MediaAttachmentManager, remove_local_file
from .media_cloudinary import CloudinaryMediaHost

__all__ = [
    "LocalFile",
    "MediaHost",
    "MediaHostError",
    "UploadedMedia",
    "extract_public_id",
    "MediaAttachmentManager",
    "remove_local_file",
    "CloudinaryMediaHost",
]
