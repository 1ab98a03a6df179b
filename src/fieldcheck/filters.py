"""Sanitizing filter service for fieldcheck.

Filters transform a resolved field value before validators see it. A filter
specification is a filter name, a callable, or a list of those applied left
to right:

    service = FilterService()
    service.sanitize("  Alice ", ["trim", "upper"])   # "ALICE"

The engine locates its filter service either from its own ``filter_service``
argument or from the process-wide default set with
set_default_filter_service().
"""

import html
import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from fieldcheck.validation.errors import FilterNotFoundError

logger = logging.getLogger(__name__)

FilterFn = Callable[[Any], Any]

_TAG_PATTERN = re.compile(r"<[^>]*>")
_EMAIL_REJECT = re.compile(r"[^a-zA-Z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")
_URL_REJECT = re.compile(r"[^a-zA-Z0-9$\-_.+!*'(),{}|\\^~\[\]`<>#%\";/?:@&=]")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_INT_REJECT = re.compile(r"[^0-9+\-]")
_FLOAT_REJECT = re.compile(r"[^0-9+\-.eE]")


# =============================================================================
# Built-in filters
# =============================================================================


def _strip_tags(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return _TAG_PATTERN.sub("", value)


def _trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _upper(value: Any) -> Any:
    return value.upper() if isinstance(value, str) else value


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    cleaned = _INT_REJECT.sub("", str(value))
    try:
        return int(cleaned)
    except ValueError:
        return 0


def _abs_int(value: Any) -> int:
    return abs(_to_int(value))


def _to_float(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = _FLOAT_REJECT.sub("", str(value))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def _alphanum(value: Any) -> Any:
    return _NON_ALNUM.sub("", str(value))


def _email(value: Any) -> Any:
    return _EMAIL_REJECT.sub("", str(value))


def _url(value: Any) -> Any:
    return _URL_REJECT.sub("", str(value))


def _special_chars(value: Any) -> Any:
    return html.escape(str(value), quote=True)


BUILTIN_FILTERS: dict[str, FilterFn] = {
    "string": _strip_tags,
    "striptags": _strip_tags,
    "trim": _trim,
    "lower": _lower,
    "upper": _upper,
    "int": _to_int,
    "absint": _abs_int,
    "float": _to_float,
    "alphanum": _alphanum,
    "email": _email,
    "url": _url,
    "special_chars": _special_chars,
}


# =============================================================================
# Filter Service
# =============================================================================


class FilterService:
    """Applies named or callable filters to values.

    Lists, tuples and dict values are filtered element by element.
    Custom filters are registered per service instance with add().
    """

    def __init__(self, filters: Mapping[str, FilterFn] | None = None):
        self._filters: dict[str, FilterFn] = dict(BUILTIN_FILTERS)
        if filters:
            self._filters.update(filters)

    def add(self, name: str, handler: FilterFn) -> "FilterService":
        """Register (or replace) a named filter."""
        self._filters[name] = handler
        return self

    def has(self, name: str) -> bool:
        return name in self._filters

    def list_filters(self) -> list[str]:
        return sorted(self._filters.keys())

    def sanitize(self, value: Any, filters: Any) -> Any:
        """Apply a filter specification to a value.

        Args:
            value: The value to transform
            filters: A filter name, a callable, or a list of those

        Returns:
            The transformed value

        Raises:
            FilterNotFoundError: If a named filter is not registered
        """
        if isinstance(filters, (list, tuple)):
            for item in filters:
                value = self.sanitize(value, item)
            return value

        handler = self._resolve(filters)
        return self._apply(value, handler)

    def _resolve(self, spec: Any) -> FilterFn:
        if callable(spec):
            return spec
        if isinstance(spec, str) and spec in self._filters:
            return self._filters[spec]
        raise FilterNotFoundError(f"Sanitize filter '{spec}' is not supported")

    def _apply(self, value: Any, handler: FilterFn) -> Any:
        if isinstance(value, list):
            return [self._apply(item, handler) for item in value]
        if isinstance(value, tuple):
            return tuple(self._apply(item, handler) for item in value)
        if isinstance(value, dict):
            return {key: self._apply(item, handler) for key, item in value.items()}
        return handler(value)


# =============================================================================
# Service location
# =============================================================================


_default_service: FilterService | None = None


def set_default_filter_service(service: FilterService | None) -> None:
    """Set (or clear, with None) the process-wide default filter service."""
    global _default_service
    _default_service = service
    logger.debug("Default filter service set to %r", service)


def get_default_filter_service() -> FilterService | None:
    """Return the process-wide default filter service, if one is set."""
    return _default_service
