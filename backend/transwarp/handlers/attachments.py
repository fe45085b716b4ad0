"""Attachments — multipart upload into the scratch directory."""

import logging

from fastapi import Depends, File, Request, UploadFile

from transwarp.api.context import current_identity
from transwarp.core.errors import invalid_param, not_allowed
from transwarp.core.roles import Identity, can_manage
from transwarp.infrastructure.uploads import save_upload

logger = logging.getLogger(__name__)


async def upload_attachment(
    request: Request,
    file: UploadFile | None = File(None),
    identity: Identity | None = Depends(current_identity),
):
    """Upload an attachment.

    Requires a contributor (or higher) session.
    Form field `file`: the uploaded file.
    Returns {"name", "size", "stored"}.
    """
    if not can_manage(identity):
        raise not_allowed("Only contributors can upload attachments.")
    if file is None or not file.filename:
        raise invalid_param("file")
    stored = await save_upload(file, request.app.state.settings.upload_dir)
    logger.info(f"stored upload {file.filename} as {stored.name}")
    return {"name": file.filename, "size": stored.stat().st_size, "stored": stored.name}


def routes():
    return {"POST /api/attachments": upload_attachment}
