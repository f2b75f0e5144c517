"""
Media Host Abstract Interface

Provides a unified interface for remote object stores that hold avatars and
cover images. Implementations upload a local file and return a stable URL plus
an identifier usable for deletion.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse


class MediaHostError(Exception):
    """Raised by a MediaHost when the remote call fails."""


@dataclass
class LocalFile:
    """An uploaded file already spooled to local disk."""
    path: str
    filename: Optional[str] = None
    content_type: Optional[str] = None


@dataclass
class UploadedMedia:
    """Result of a successful remote upload"""
    url: str
    public_id: str
    resource_type: str = "image"


_VERSION_SEGMENT = re.compile(r"^v\d+$")


def extract_public_id(url: str) -> str:
    """
    Recover the remote identifier from a delivery URL.

    https://res.cloudinary.com/<cloud>/image/upload/v1712/avatars/abc.png -> "avatars/abc"

    URLs without an "/upload/" segment fall back to the last path segment
    without its extension.
    """
    path = urlparse(url).path
    if "/upload/" in path:
        segments = path.split("/upload/", 1)[1].split("/")
        if segments and _VERSION_SEGMENT.match(segments[0]):
            segments = segments[1:]
    else:
        segments = path.rsplit("/", 1)[-1:]
    segments = [s for s in segments if s]
    if not segments:
        return ""
    segments[-1] = segments[-1].split(".", 1)[0]
    return "/".join(segments)


def extract_resource_type(url: str) -> str:
    """
    Resource type segment preceding "/upload/" in a delivery URL.

    https://res.cloudinary.com/<cloud>/video/upload/v1712/clips/a.mp4 -> "video"

    Defaults to "image" when the URL has no such segment.
    """
    path = urlparse(url).path
    if "/upload/" not in path:
        return "image"
    head = path.split("/upload/", 1)[0].rstrip("/")
    return head.rsplit("/", 1)[-1] or "image"


class MediaHost(ABC):
    """Remote media host abstract base class"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name"""
        pass

    @abstractmethod
    async def upload(self, local_path: str) -> UploadedMedia:
        """
        Upload a local file.

        Returns:
        - UploadedMedia with a stable URL and the remote identifier

        Raises:
        - MediaHostError when the host rejects the file or is unreachable
        """
        pass

    @abstractmethod
    async def delete(self, public_id: str, resource_type: str = "image") -> None:
        """Delete a remote object by identifier. Raises MediaHostError on failure."""
        pass

    async def aclose(self) -> None:
        """Release network resources (called at application shutdown)."""
        return None
