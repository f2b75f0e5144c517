"""
Cloudinary Media Host Adapter

Talks to the Cloudinary REST upload API with signed requests.
"""
import asyncio
import hashlib
import logging
import os
import time
from pathlib import Path
from typing import Optional

import httpx

from .media_base import MediaHost, MediaHostError, UploadedMedia
from ..config import settings

logger = logging.getLogger("uvicorn.error")


def sign_params(params: dict, api_secret: str) -> str:
    """
    Cloudinary request signature: sha1 of the sorted `k=v&...` string with the
    API secret appended. Empty values are not signed.
    """
    to_sign = "&".join(
        f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryMediaHost(MediaHost):
    """Cloudinary upload/destroy over httpx"""

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: Optional[str] = None,
        api_base: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.cloud_name = cloud_name or settings.cloudinary_cloud_name
        self.api_key = api_key or settings.cloudinary_api_key
        self.api_secret = api_secret or settings.cloudinary_api_secret
        self.folder = folder if folder is not None else settings.cloudinary_folder
        self.api_base = (api_base or settings.cloudinary_api_base).rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=60)

    @property
    def name(self) -> str:
        return "Cloudinary"

    def is_available(self) -> bool:
        """Check if credentials are configured"""
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _signed(self, params: dict) -> dict:
        params = {k: v for k, v in params.items() if v not in (None, "")}
        params["timestamp"] = str(int(time.time()))
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key
        return params

    async def _post(self, url: str, data: dict, files: Optional[dict] = None) -> dict:
        try:
            resp = await self._client.post(url, data=data, files=files)
        except httpx.HTTPError as exc:
            raise MediaHostError(f"{self.name}: request failed: {exc}") from exc
        if resp.status_code >= 400:
            raise MediaHostError(f"{self.name}: HTTP {resp.status_code}: {resp.text[:200]}")
        try:
            return resp.json()
        except ValueError as exc:
            raise MediaHostError(f"{self.name}: invalid JSON response") from exc

    async def upload(self, local_path: str) -> UploadedMedia:
        if not self.is_available():
            raise MediaHostError(f"{self.name}: credentials not configured")

        content = await asyncio.to_thread(Path(local_path).read_bytes)

        url = f"{self.api_base}/{self.cloud_name}/auto/upload"
        data = self._signed({"folder": self.folder})
        files = {"file": (os.path.basename(local_path), content)}
        body = await self._post(url, data, files)

        delivered = body.get("secure_url") or body.get("url")
        public_id = body.get("public_id")
        if not delivered or not public_id:
            raise MediaHostError(f"{self.name}: upload response missing url/public_id")
        logger.info("[media] uploaded %s -> %s", os.path.basename(local_path), delivered)
        return UploadedMedia(
            url=delivered,
            public_id=public_id,
            resource_type=body.get("resource_type") or "image",
        )

    async def delete(self, public_id: str, resource_type: str = "image") -> None:
        if not self.is_available():
            raise MediaHostError(f"{self.name}: credentials not configured")

        # "auto" uploads land under image/video/raw; destroy needs the concrete type
        url = f"{self.api_base}/{self.cloud_name}/{resource_type}/destroy"
        body = await self._post(url, self._signed({"public_id": public_id}))
        result = body.get("result")
        # "not found" means the object is already gone
        if result not in ("ok", "not found"):
            raise MediaHostError(f"{self.name}: destroy returned {result!r}")

    async def aclose(self) -> None:
        await self._client.aclose()
