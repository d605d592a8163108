"""File ingestion: selected files to base64 payloads with previews.

The whole selection is validated before any file is encoded, so a bad
selection never produces partial output. Output order is selection order;
page order matters when the model consolidates pages into one table.

PDF previews are a PNG render of the first page (PyMuPDF).
"""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Sequence

import fitz  # PyMuPDF

from digitizer.core.config import IngestionLimits
from digitizer.core.errors import validation_error
from digitizer.pydantic_models.session_models import FilePayload, RawFile

logger = logging.getLogger(__name__)


def is_allowed_media_type(media_type: str) -> bool:
    return media_type.startswith(IngestionLimits.IMAGE_PREFIX) or media_type == IngestionLimits.PDF_MEDIA_TYPE


def validate_selection(raw_files: Sequence[RawFile]) -> None:
    """Check a selection before anything is read.

    Raises:
        ValidationError: If the selection is empty, has too many files, or
            contains any file that is neither an image nor a PDF.
    """
    if not raw_files:
        raise validation_error("No files selected.", field_name="files")

    if len(raw_files) > IngestionLimits.MAX_FILES:
        raise validation_error(
            f"You can only upload up to {IngestionLimits.MAX_FILES} documents at a time.",
            field_name="files",
        )

    rejected = [f.name for f in raw_files if not is_allowed_media_type(f.media_type)]
    if rejected:
        logger.debug(f"Rejected media types for: {', '.join(rejected)}")
        raise validation_error("Only images (JPG, PNG) and PDF files are allowed.", field_name="files")


def _pdf_preview(data: bytes, name: str) -> str:
    """PNG data URL of page 1, or "" if the PDF cannot be rendered."""
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            if len(doc) == 0:
                return ""
            zoom = IngestionLimits.PDF_PREVIEW_ZOOM
            pixmap = doc[0].get_pixmap(matrix=fitz.Matrix(zoom, zoom))
            png = pixmap.tobytes("png")
    except (RuntimeError, ValueError) as e:
        # fitz raises RuntimeError subclasses (FileDataError) for damaged files
        logger.warning(f"No preview for {name}: {e}")
        return ""
    return f"data:image/png;base64,{base64.b64encode(png).decode('ascii')}"


def _to_payload(raw: RawFile) -> FilePayload:
    data_base64 = base64.b64encode(raw.data).decode("ascii")
    if raw.media_type == IngestionLimits.PDF_MEDIA_TYPE:
        preview = _pdf_preview(raw.data, raw.name)
    else:
        preview = f"data:{raw.media_type};base64,{data_base64}"

    return FilePayload(
        file_name=raw.name,
        media_type=raw.media_type,
        data_base64=data_base64,
        preview=preview,
    )


def ingest(raw_files: Sequence[RawFile]) -> list[FilePayload]:
    """Validate a selection and encode every file, preserving order.

    Raises:
        ValidationError: See validate_selection().
    """
    validate_selection(raw_files)
    payloads = [_to_payload(f) for f in raw_files]
    logger.debug(f"Ingested {len(payloads)} file(s)")
    return payloads


def guess_media_type(path: str | Path) -> str:
    """Media type from the file extension, "" if unknown."""
    media_type, _ = mimetypes.guess_type(str(path))
    return media_type or ""


def read_raw_files(paths: Sequence[str | Path]) -> list[RawFile]:
    """Build RawFile objects from paths on disk.

    Raises:
        FileNotFoundError: If any path does not exist.
    """
    raw_files = []
    for p in paths:
        path = Path(p)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        raw_files.append(RawFile(name=path.name, media_type=guess_media_type(path), data=path.read_bytes()))
    return raw_files


def validate_paths(paths: Sequence[str | Path]) -> None:
    """Check the count and media types of files on disk without reading them."""
    validate_selection([RawFile(name=Path(p).name, media_type=guess_media_type(p), data=b"") for p in paths])


def ingest_paths(paths: Sequence[str | Path]) -> list[FilePayload]:
    """Validate and ingest files from disk.

    The count and media types are checked before any file is read.
    """
    validate_paths(paths)
    return ingest(read_raw_files(paths))
