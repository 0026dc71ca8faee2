import json
import logging
import secrets
import time

from fastapi import Request
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from jobportal.config import Settings
from jobportal.errors import Internal, InvalidArgument, PayloadTooLarge, format_validation_errors
from jobportal.utils.filesystem import ensure_upload_dir, safe_extension

logger = logging.getLogger(__name__)


async def read_request_payload(request: Request) -> tuple[dict, dict[str, UploadFile]]:
    """Read a JSON or multipart body into (fields, files).

    Job and application forms are posted either as JSON or as multipart with
    an optional file part, so both encodings are accepted on those routes.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        fields: dict = {}
        files: dict[str, UploadFile] = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if value.filename:
                    files[key] = value
                continue
            if key in fields:
                existing = fields[key]
                fields[key] = existing + [value] if isinstance(existing, list) else [existing, value]
            else:
                fields[key] = value
        return fields, files

    if not (await request.body()).strip():
        return {}, {}
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidArgument("Malformed JSON body") from exc
    if not isinstance(data, dict):
        raise InvalidArgument("Request body must be a JSON object")
    return data, {}


def validate_payload(model: type[BaseModel], data: dict):
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidArgument(format_validation_errors(exc.errors())) from exc


async def store_upload(upload: UploadFile | None, settings: Settings) -> str | None:
    """Write an uploaded file to the upload directory and return its stored name."""
    if upload is None:
        return None

    # Stop reading as soon as the cap is crossed
    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await upload.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise PayloadTooLarge(f"File too large (max {max_bytes} bytes)")
        chunks.append(chunk)

    content = b"".join(chunks)
    if not content:
        return None

    stored_name = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{safe_extension(upload.filename)}"
    upload_dir = ensure_upload_dir(settings.upload_dir)
    try:
        (upload_dir / stored_name).write_bytes(content)
    except OSError as exc:
        logger.error("Could not write upload %s: %s", stored_name, exc)
        raise Internal("Could not store uploaded file") from exc
    logger.info("Stored upload %s (%d bytes)", stored_name, size)
    return stored_name


def discard_upload(stored_name: str | None, settings: Settings):
    """Remove a file written by ``store_upload`` whose record was never saved."""
    if not stored_name:
        return
    (settings.upload_dir / stored_name).unlink(missing_ok=True)
    logger.info("Discarded upload %s", stored_name)
