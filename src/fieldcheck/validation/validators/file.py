"""File upload validator.

The value of a file field is an upload descriptor mapping, as produced by a
web framework adapter:

    {
        "error": UploadError.OK,
        "tmp_name": "/tmp/upload-1234",
        "name": "avatar.png",
        "type": "image/png",
        "size": 20480,
        "width": 640,      # optional, images only
        "height": 480,     # optional, images only
    }
"""

import mimetypes
import re
from collections.abc import Mapping
from enum import IntEnum
from pathlib import Path
from typing import Any

from fieldcheck.validation.errors import InvalidOptionError
from fieldcheck.validation.registry import BaseValidator
from fieldcheck.validation.types import is_empty

# Binary unit -> power of two
BYTE_UNITS: dict[str, int] = {
    "B": 0,
    "K": 10,
    "M": 20,
    "G": 30,
    "T": 40,
    "KB": 10,
    "MB": 20,
    "GB": 30,
    "TB": 40,
}

SIZE_PATTERN = re.compile(
    r"^([0-9]+(?:\.[0-9]+)?)(" + "|".join(BYTE_UNITS) + r")?$",
    re.IGNORECASE,
)


class UploadError(IntEnum):
    """Upload status codes carried in the descriptor's ``error`` key."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


def parse_size(size: Any) -> float:
    """Convert a size such as ``"2M"``, ``"512K"`` or ``"1.5MB"`` to bytes.

    Raises:
        InvalidOptionError: If the size cannot be parsed
    """
    match = SIZE_PATTERN.match(str(size).strip())
    if match is None:
        raise InvalidOptionError(f"Invalid file size '{size}'")
    unit = (match.group(2) or "B").upper()
    return float(match.group(1)) * 2 ** BYTE_UNITS[unit]


def parse_resolution(resolution: Any) -> tuple[int, int]:
    """Convert ``"800x600"`` to (800, 600).

    Raises:
        InvalidOptionError: If the resolution cannot be parsed
    """
    try:
        width, height = str(resolution).lower().split("x")
        return int(width), int(height)
    except ValueError:
        raise InvalidOptionError(f"Invalid resolution '{resolution}'") from None


class File(BaseValidator):
    """Checks an uploaded file.

    Options:
        maxSize: Maximum size, e.g. "2M"
        allowedTypes: List of accepted MIME types
        minResolution / maxResolution: "WIDTHxHEIGHT" bounds for images
        messageIniSize, messageEmpty, messageValid, messageSize, messageType,
        messageMinResolution, messageMaxResolution: per-check messages

    Every option accepts a per-field map.
    """

    type = "File"

    def validate(self, validation, field):
        value = validation.get_value(field)
        upload: Mapping[str, Any] = value if isinstance(value, Mapping) else {}

        if upload.get("error") == UploadError.INI_SIZE:
            return self.fail(validation, field, "FileIniSize", option="messageIniSize")

        tmp_name = upload.get("tmp_name")
        if (
            upload.get("error") is None
            or tmp_name is None
            or upload.get("error") != UploadError.OK
            or not Path(tmp_name).is_file()
        ):
            return self.fail(validation, field, "FileEmpty", option="messageEmpty")

        if any(upload.get(key) is None for key in ("name", "type", "size")):
            return self.fail(validation, field, "FileValid", option="messageValid")

        if self.has_option("maxSize"):
            max_size = self.field_option("maxSize", field)
            if max_size is not None and float(upload["size"]) > parse_size(max_size):
                return self.fail(
                    validation,
                    field,
                    "FileSize",
                    {":max": max_size},
                    option="messageSize",
                )

        if self.has_option("allowedTypes"):
            types = self.field_option("allowedTypes", field)
            if not isinstance(types, (list, tuple)):
                raise InvalidOptionError("Option 'allowedTypes' must be a list")

            if self._mime_type(upload) not in types:
                return self.fail(
                    validation,
                    field,
                    "FileType",
                    {":types": ", ".join(types)},
                    option="messageType",
                )

        if self.has_option("minResolution") or self.has_option("maxResolution"):
            return self._check_resolution(validation, field, upload)

        return True

    def is_allow_empty(self, validation, field) -> bool:
        value = validation.get_value(field)
        if is_empty(value):
            return True
        return isinstance(value, Mapping) and value.get("error") == UploadError.NO_FILE

    def _mime_type(self, upload: Mapping[str, Any]) -> str:
        guessed, _ = mimetypes.guess_type(str(upload["name"]))
        return guessed or upload["type"]

    def _check_resolution(self, validation, field, upload: Mapping[str, Any]) -> bool:
        width = int(upload.get("width") or 0)
        height = int(upload.get("height") or 0)

        min_resolution = self.field_option("minResolution", field)
        min_width, min_height = (
            parse_resolution(min_resolution) if min_resolution is not None else (1, 1)
        )

        if width < min_width or height < min_height:
            return self.fail(
                validation,
                field,
                "FileMinResolution",
                {":min": min_resolution},
                option="messageMinResolution",
            )

        max_resolution = self.field_option("maxResolution", field)
        if max_resolution is not None:
            max_width, max_height = parse_resolution(max_resolution)
            if width > max_width or height > max_height:
                return self.fail(
                    validation,
                    field,
                    "FileMaxResolution",
                    {":max": max_resolution},
                    option="messageMaxResolution",
                )

        return True
