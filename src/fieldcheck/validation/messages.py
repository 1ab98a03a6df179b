"""Message collection and placeholder interpolation."""

import re
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from fieldcheck.validation.errors import InvalidArgumentError, InvalidMessageError
from fieldcheck.validation.types import Message


def interpolate(template: str, replacements: Mapping[str, Any]) -> str:
    """Replace ``:placeholder`` tokens in a message template.

    Longer placeholders win over their prefixes (``:maximum`` before ``:max``)
    and replaced text is never scanned again.

    Example:
        interpolate("Field :field must be at most :max", {":field": "Age", ":max": 65})
        # "Field Age must be at most 65"
    """
    if not template or not replacements:
        return template or ""

    keys = sorted(replacements, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(k) for k in keys))

    def replace(match: re.Match) -> str:
        value = replacements[match.group(0)]
        return "" if value is None else str(value)

    return pattern.sub(replace, template)


class MessageGroup:
    """Ordered, indexable collection of validation messages.

    Behaves like a list of Message objects: supports len(), iteration,
    indexing, item assignment and deletion. Deleting an index splices the
    list, so later messages shift down by one.

    Example:
        messages = validation.validate({"age": 15})
        for message in messages.filter("age"):
            print(message)
    """

    def __init__(self, messages: Iterable[Message] | None = None):
        self._messages: list[Message] = []
        if messages is not None:
            for message in messages:
                self.append_message(message)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    def __setitem__(self, index: int, message: Message) -> None:
        if not isinstance(message, Message):
            raise InvalidMessageError("The message must be a Message instance")
        if index == len(self._messages):
            self._messages.append(message)
        else:
            self._messages[index] = message

    def __delitem__(self, index: int) -> None:
        # Unknown indexes are ignored
        if 0 <= index < len(self._messages):
            del self._messages[index]

    def __repr__(self) -> str:
        return f"MessageGroup({self._messages!r})"

    def exists(self, index: int) -> bool:
        """Check whether a message is stored at the given index."""
        return 0 <= index < len(self._messages)

    def append_message(self, message: Message) -> None:
        """Append a single message to the end of the group."""
        if not isinstance(message, Message):
            raise InvalidMessageError("The message must be a Message instance")
        self._messages.append(message)

    def append_messages(self, messages: "Iterable[Message] | MessageGroup") -> None:
        """Append every message of a list or another group, in order."""
        if isinstance(messages, (str, bytes, Mapping)) or not isinstance(messages, Iterable):
            raise InvalidArgumentError("The messages must be a list or a MessageGroup")
        for message in list(messages):
            self.append_message(message)

    def filter(self, field_name: Any) -> list[Message]:
        """Return the messages whose field equals field_name, in original order."""
        return [m for m in self._messages if m.field == field_name]

    def to_list(self) -> list[Message]:
        return list(self._messages)

    def to_dict(self) -> list[dict[str, Any]]:
        return [m.to_dict() for m in self._messages]

    @classmethod
    def from_dict(cls, data: Iterable[Mapping[str, Any]]) -> "MessageGroup":
        """Rebuild a group from its to_dict() form."""
        return cls(Message.from_dict(item) for item in data)
