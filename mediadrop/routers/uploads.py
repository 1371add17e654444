"""Upload endpoint for images and PDFs.

POST /upload accepts multipart form-data with a single file field named
`image`. The payload type is sniffed from its leading bytes and the file is
stored as <TMP_DIR>/<uuid><ext>; the client's filename is ignored.
"""

import logging

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.responses import PlainTextResponse

from mediadrop.core.body_limit import limit_body
from mediadrop.core.errors import ErrorKind, UploadError
from mediadrop.services.content_types import detect_content_type, extensions_by_type, is_accepted
from mediadrop.services.storage import CreateFailed, artifact_path, new_identifier, write_artifact


router = APIRouter()
logger = logging.getLogger(__name__)


MAX_UPLOAD_BYTES = 2 * 1024 * 1024  # 2 MiB
FIELD_NAME = "image"


@router.post("/upload")
async def upload_file(request: Request) -> PlainTextResponse:
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise UploadError(ErrorKind.OVERSIZE, "File Too Big: request Content-Type isn't multipart/form-data")

    bounded = limit_body(request, MAX_UPLOAD_BYTES)
    try:
        form = await bounded.form(max_part_size=MAX_UPLOAD_BYTES)
    except Exception as exc:
        raise UploadError(ErrorKind.OVERSIZE, f"File Too Big: {exc}", exc) from exc

    try:
        part = next((v for v in form.getlist(FIELD_NAME) if isinstance(v, UploadFile)), None)
        if part is None:
            raise UploadError(ErrorKind.MALFORMED, f"Not Parse : no file in field {FIELD_NAME!r}")
        try:
            data = await part.read()
        except Exception as exc:
            raise UploadError(ErrorKind.MALFORMED, f"Not Read : {exc}", exc) from exc
    finally:
        await form.close()

    # only the first 512 bytes are looked at
    filetype = detect_content_type(data)
    if not is_accepted(filetype):
        raise UploadError(ErrorKind.UNSUPPORTED, "Not Support this extention")

    file_id = new_identifier()
    try:
        endings = extensions_by_type(filetype)
    except LookupError as exc:
        raise UploadError(ErrorKind.INTERNAL, f"Can not read file type : {exc}", exc) from exc
    logger.debug("extensions for %s: %s", filetype, endings)

    upload_dir = request.app.state.settings.tmp_dir
    new_path = artifact_path(upload_dir, file_id, endings[0])
    logger.info("FileType: %s, File: %s", filetype, new_path)

    try:
        await run_in_threadpool(write_artifact, new_path, data)
    except CreateFailed as exc:
        raise UploadError(ErrorKind.INTERNAL, f"Can not create file : {exc}", exc) from exc
    except OSError as exc:
        raise UploadError(ErrorKind.INTERNAL, f"Can not write file : {exc}", exc) from exc

    return PlainTextResponse("SUCCESS")
