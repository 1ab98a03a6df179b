"""Canned validators for fieldcheck.

This module provides ready-to-use validators that can be added to a
Validation directly or referenced by type name from rule files.
"""

from fieldcheck.validation.validators.canned import (
    BUILTIN_VALIDATORS,
    Alnum,
    Alpha,
    Between,
    Callback,
    Numericality,
    PresenceOf,
    Uniqueness,
    register_builtin_validators,
)
from fieldcheck.validation.validators.file import File, UploadError

__all__ = [
    "BUILTIN_VALIDATORS",
    "Alnum",
    "Alpha",
    "Between",
    "Callback",
    "File",
    "Numericality",
    "PresenceOf",
    "UploadError",
    "Uniqueness",
    "register_builtin_validators",
]
