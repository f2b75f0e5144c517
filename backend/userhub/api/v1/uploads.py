# userhub/api/v1/uploads.py
"""
Multipart preprocessing: spool UploadFile parts to local temporary files so the
services only ever see a LocalFile path.
"""
import os
import tempfile
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import UploadFile

from userhub.config import settings
from userhub.services.media import remove_local_file
from userhub.services.media_base import LocalFile

CHUNK_SIZE = 1024 * 1024


async def spool_upload(upload: Optional[UploadFile]) -> Optional[LocalFile]:
    """Write one multipart file to UPLOAD_TMP_DIR; None when no file was sent."""
    if upload is None or not upload.filename:
        return None

    os.makedirs(settings.upload_tmp_dir, exist_ok=True)
    suffix = os.path.splitext(upload.filename)[1]
    tmp = tempfile.NamedTemporaryFile(delete=False, dir=settings.upload_tmp_dir, suffix=suffix)
    try:
        with tmp:
            while chunk := await upload.read(CHUNK_SIZE):
                tmp.write(chunk)
    except Exception:
        os.unlink(tmp.name)
        raise
    finally:
        await upload.close()
    return LocalFile(path=tmp.name, filename=upload.filename, content_type=upload.content_type)


@asynccontextmanager
async def spooled(*uploads: Optional[UploadFile]) -> AsyncIterator[list[Optional[LocalFile]]]:
    """
    Spool every upload and remove whatever is still on disk when the block exits,
    including when the request fails before the file reached the media host.
    """
    files: list[Optional[LocalFile]] = []
    try:
        for upload in uploads:
            files.append(await spool_upload(upload))
        yield files
    finally:
        for local in files:
            if local is not None:
                remove_local_file(local.path)
