"""Serializers that render received values as canonical snapshot text."""

from __future__ import annotations

import dataclasses
import inspect
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel
from syrupy.extensions.amber.serializer import AmberDataSerializer

from models.schemas import SerializerConfig


class Serializer(Protocol):
    """Turns any value into a deterministic, possibly multi-line string."""

    def serialize(self, value: Any, config: SerializerConfig) -> str:
        ...


class PrettySerializer:
    """
    Pretty-format style serializer.

    Mapping keys and object attributes print in sorted order, set members in
    sorted rendered order, so structurally equal values render identically.
    Plain dicts and lists print bare unless ``print_basic_prototype`` is set;
    every other container prints its type name.
    """

    def serialize(self, value: Any, config: SerializerConfig) -> str:
        return self._print(value, config, "", 0, ())

    def _print(
        self,
        value: Any,
        config: SerializerConfig,
        indentation: str,
        depth: int,
        refs: tuple[int, ...],
    ) -> str:
        if isinstance(value, Enum):
            return f"{type(value).__name__}.{value.name}"
        if value is None or isinstance(value, (bool, int, float, complex)):
            return repr(value)
        if isinstance(value, str):
            return self._print_string(value, config)
        if isinstance(value, (bytes, bytearray)):
            return repr(value)
        if isinstance(value, type):
            return f"[class {value.__name__}]"
        if inspect.isroutine(value):
            return "[Function]"
        if isinstance(value, BaseException):
            return f"[{type(value).__name__}: {value}]"

        if id(value) in refs:
            return "[Circular]"
        refs = (*refs, id(value))
        depth += 1
        name = type(value).__name__

        fields = self._object_fields(value)
        if fields is None and not isinstance(value, (dict, list, tuple, set, frozenset)):
            return repr(value)
        if config.max_depth is not None and depth > config.max_depth:
            return f"[{name}]"

        if isinstance(value, dict):
            prefix = self._prefix(value, dict, config)
            pairs = sorted(
                ((self._print_key(k, config, indentation, depth, refs), v) for k, v in value.items()),
                key=lambda pair: pair[0],
            )
            return prefix + "{" + self._print_entries(pairs, config, indentation, depth, refs) + "}"

        if isinstance(value, list):
            prefix = self._prefix(value, list, config)
            pairs = [(None, item) for item in value]
            return prefix + "[" + self._print_entries(pairs, config, indentation, depth, refs) + "]"

        if isinstance(value, tuple) and fields is None:
            pairs = [(None, item) for item in value]
            return f"{name} [" + self._print_entries(pairs, config, indentation, depth, refs) + "]"

        if isinstance(value, (set, frozenset)):
            inner = indentation + " " * config.indent
            members = sorted(self._print(item, config, inner, depth, refs) for item in value)
            return f"{name} {{" + self._join_lines(members, config, indentation) + "}"

        pairs = sorted(
            ((self._print_string(key, config), item) for key, item in (fields or {}).items()),
            key=lambda pair: pair[0],
        )
        return f"{name} {{" + self._print_entries(pairs, config, indentation, depth, refs) + "}"

    @staticmethod
    def _prefix(value: Any, basic: type, config: SerializerConfig) -> str:
        if type(value) is not basic or config.print_basic_prototype:
            return f"{type(value).__name__} "
        return ""

    @staticmethod
    def _object_fields(value: Any) -> dict[str, Any] | None:
        if isinstance(value, BaseModel):
            return {name: getattr(value, name) for name in type(value).model_fields}
        if dataclasses.is_dataclass(value):
            return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        if isinstance(value, tuple) and hasattr(value, "_fields"):
            return dict(zip(value._fields, value))
        if isinstance(value, (dict, list, tuple, set, frozenset)):
            return None
        attributes = getattr(value, "__dict__", None)
        if isinstance(attributes, dict):
            return dict(attributes)
        if type(value).__repr__ is not object.__repr__:
            return None
        # Default repr carries the memory address; print slots instead.
        fields = {}
        for cls in type(value).__mro__:
            slots = cls.__dict__.get("__slots__", ())
            if isinstance(slots, str):
                slots = (slots,)
            for slot in slots:
                if slot in ("__dict__", "__weakref__") or slot in fields:
                    continue
                try:
                    fields[slot] = getattr(value, slot)
                except AttributeError:
                    continue
        return fields

    @staticmethod
    def _print_string(value: str, config: SerializerConfig) -> str:
        if config.escape_string:
            value = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{value}"'

    def _print_key(
        self,
        key: Any,
        config: SerializerConfig,
        indentation: str,
        depth: int,
        refs: tuple[int, ...],
    ) -> str:
        if isinstance(key, str):
            return self._print_string(key, config)
        return self._print(key, config, indentation, depth, refs)

    def _print_entries(
        self,
        pairs: list[tuple[str | None, Any]],
        config: SerializerConfig,
        indentation: str,
        depth: int,
        refs: tuple[int, ...],
    ) -> str:
        inner = indentation + " " * config.indent
        lines = []
        for label, item in pairs:
            text = self._print(item, config, inner, depth, refs)
            lines.append(text if label is None else f"{label}: {text}")
        return self._join_lines(lines, config, indentation)

    @staticmethod
    def _join_lines(lines: list[str], config: SerializerConfig, indentation: str) -> str:
        if not lines:
            return ""
        inner = indentation + " " * config.indent
        body = "\n".join(f"{inner}{line}," for line in lines)
        return f"\n{body}\n{indentation}"


class AmberSerializer:
    """Renders values the way syrupy writes them into ``.ambr`` files."""

    def serialize(self, value: Any, config: SerializerConfig) -> str:
        return AmberDataSerializer.serialize(value)


_SERIALIZERS: dict[str, type] = {
    "pretty": PrettySerializer,
    "amber": AmberSerializer,
}


def get_serializer(name: str) -> Serializer:
    """Instantiate a serializer by its configured name."""
    try:
        return _SERIALIZERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown serializer: {name!r}. Expected one of {sorted(_SERIALIZERS)}"
        ) from None


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def serialize(
    value: Any,
    serializer: Serializer | None = None,
    config: SerializerConfig | None = None,
) -> str:
    """Render ``value`` with ``serializer`` and normalize line endings."""
    serializer = serializer or PrettySerializer()
    config = config or SerializerConfig()
    return normalize_newlines(serializer.serialize(value, config))


def add_extra_line_breaks(text: str) -> str:
    """Pad multi-line text with a leading and trailing newline (stored form)."""
    return f"\n{text}\n" if "\n" in text else text


def remove_extra_line_breaks(text: str) -> str:
    """Undo add_extra_line_breaks."""
    if len(text) > 2 and text.startswith("\n") and text.endswith("\n"):
        return text[1:-1]
    return text
