# src/gptsession/attachments.py
"""
Encoding of local files for inline embedding in chat messages.
"""

import base64
import logging
import mimetypes
import pathlib
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"


def encode_file_as_base64(file_path: Union[str, pathlib.Path, None]) -> Optional[str]:
    """
    Reads a file and returns its content as a strict base64 string.

    Args:
        file_path: Path of the file to encode.

    Returns:
        The base64 encoded content, or None if the file does not exist
        or cannot be read.
    """
    path = pathlib.Path(str(file_path)) if file_path is not None else None
    if path is None or not path.is_file():
        logger.warning(f"File not found: <{file_path}>")
        return None

    try:
        content = path.read_bytes()
    except OSError as e:
        logger.error(f"Could not read file <{file_path}>: {e}")
        return None

    encoded = base64.b64encode(content).decode("ascii")
    logger.debug(f"Encoded {path} ({len(encoded)} base64 chars)")
    return encoded


def encode_image_data_uri(file_path: Union[str, pathlib.Path, None]) -> Optional[str]:
    """Builds a ``data:`` URI for an image file, or None if it cannot be read."""
    data = encode_file_as_base64(file_path)
    if data is None:
        return None

    mime_type, _ = mimetypes.guess_type(str(file_path))
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = DEFAULT_IMAGE_MIME_TYPE
    return f"data:{mime_type};base64,{data}"
