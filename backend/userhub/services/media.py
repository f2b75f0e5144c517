"""
Media Attachment Manager

Uploads avatar/cover-image files for a user record and removes replaced
assets from the remote host. The remote host is injected, never global.
"""
import logging
import os
from typing import Optional

from .media_base import (
    LocalFile,
    MediaHost,
    MediaHostError,
    UploadedMedia,
    extract_public_id,
    extract_resource_type,
)

logger = logging.getLogger("uvicorn.error")


def remove_local_file(path: Optional[str]) -> None:
    """Delete a spooled upload if it is still on disk."""
    if path and os.path.exists(path):
        os.unlink(path)


class MediaAttachmentManager:
    def __init__(self, host: MediaHost):
        self.host = host

    async def upload(self, local: Optional[LocalFile]) -> Optional[UploadedMedia]:
        """
        Push a spooled file to the media host.

        Returns None when there is no file or the host rejected it; callers turn
        that into a ValidationError. The local file is removed on both paths.
        """
        if local is None or not local.path:
            return None
        try:
            return await self.host.upload(local.path)
        except MediaHostError as exc:
            logger.warning("[media] upload to %s failed: %s", self.host.name, exc)
            return None
        finally:
            remove_local_file(local.path)

    async def discard(self, url: Optional[str]) -> bool:
        """
        Delete a previously referenced asset by its URL.

        Only called after the replacing URL is persisted; a failure here leaves an
        orphaned remote object but never touches the user record. Returns whether
        the delete went through.
        """
        if not url:
            return False
        public_id = extract_public_id(url)
        if not public_id:
            return False
        try:
            await self.host.delete(public_id, resource_type=extract_resource_type(url))
        except MediaHostError as exc:
            logger.warning("[media] could not delete %s from %s: %s", public_id, self.host.name, exc)
            return False
        return True
