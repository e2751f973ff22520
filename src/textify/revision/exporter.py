"""
File export of the cleaned text.

Both formats carry the same content; only the declared content type and the
filename extension differ.
"""

from enum import Enum
from pathlib import Path
from typing import Union

import structlog

from ..models.revision import ExportedFile


logger = structlog.get_logger(__name__)

EXPORT_BASENAME = "cleaned-text"


class ExportFormat(str, Enum):
    """Supported export formats."""
    TXT = "txt"
    MD = "md"


_CONTENT_TYPES = {
    ExportFormat.TXT: "text/plain",
    ExportFormat.MD: "text/markdown",
}


def export_text(text: str, fmt: Union[ExportFormat, str] = ExportFormat.TXT) -> ExportedFile:
    """
    Wrap ``text`` as a downloadable file.

    Args:
        text: Cleaned text
        fmt: ``"txt"`` or ``"md"``

    Returns:
        ExportedFile named ``cleaned-text.<ext>``

    Raises:
        ValueError: If the format is unknown
    """
    fmt = ExportFormat(fmt)
    exported = ExportedFile(
        filename=f"{EXPORT_BASENAME}.{fmt.value}",
        content_type=_CONTENT_TYPES[fmt],
        content=text,
    )
    logger.info("text_exported", filename=exported.filename, length=len(text))
    return exported


def write_export(exported: ExportedFile, directory: Union[str, Path]) -> Path:
    """Write an exported file into ``directory`` and return its path."""
    path = Path(directory) / exported.filename
    path.write_text(exported.content, encoding="utf-8")
    return path
