# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
JSON payload decoding against a caller-supplied target type.

The payload is parsed with `json` (so the DecoderConfig parse hooks apply), keys are
optionally transformed, and the value is validated with a pydantic TypeAdapter.
Anything pydantic can validate works as a target: BaseModel subclasses, dataclasses,
enums, `list[...]`, `tuple[...]`, `dict[str, ...]`, unions and `typing.Any`.
A plain function is applied to the parsed value instead.
"""

from __future__ import annotations

import inspect
import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from ..errors import DecodingError

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@dataclass
class DecoderConfig:
    """Knobs a caller may adjust before decoding; passed to the `configure` hook."""

    key_transform: Callable[[str], str] | None = None
    parse_float: Callable[[str], Any] | None = None
    parse_int: Callable[[str], Any] | None = None
    strict: bool = True


def convert_from_camel_case(key: str) -> str:
    """`firstName` -> `first_name`, `HTTPStatus` -> `http_status`."""
    return _CAMEL_BOUNDARY_RE.sub("_", key).lower()


def convert_to_camel_case(key: str) -> str:
    """`first_name` -> `firstName`; leading underscores are kept."""
    stripped = key.lstrip("_")
    head, *rest = stripped.split("_")
    return key[: len(key) - len(stripped)] + head + "".join(part[:1].upper() + part[1:] for part in rest)


def decode_json(
    data: bytes,
    schema: Any,
    configure: Callable[[DecoderConfig], None] | None = None,
) -> Any:
    """Parse `data` as JSON and decode it into `schema`, raising DecodingError on mismatch."""
    config = DecoderConfig()
    if configure is not None:
        configure(config)

    try:
        value = json.loads(
            data,
            parse_float=config.parse_float,
            parse_int=config.parse_int,
            strict=config.strict,
        )
    except (UnicodeDecodeError, ValueError) as exc:
        raise DecodingError(f"invalid JSON: {exc}") from exc

    if config.key_transform is not None:
        value = _transform_keys(value, config.key_transform)

    if inspect.isfunction(schema) or inspect.ismethod(schema):
        try:
            return schema(value)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise DecodingError(str(exc)) from exc

    try:
        adapter = TypeAdapter(schema)
    except PydanticUserError as exc:
        raise DecodingError(f"unsupported target type {schema!r}") from exc

    try:
        return adapter.validate_python(value)
    except ValidationError as exc:
        detail = "; ".join(f"{'.'.join(str(loc) for loc in err['loc']) or '$'}: {err['msg']}" for err in exc.errors())
        raise DecodingError(detail) from exc


def _transform_keys(value: Any, transform: Callable[[str], str]) -> Any:
    if isinstance(value, dict):
        return {transform(key): _transform_keys(item, transform) for key, item in value.items()}
    if isinstance(value, list):
        return [_transform_keys(item, transform) for item in value]
    return value


__all__ = ["DecoderConfig", "convert_from_camel_case", "convert_to_camel_case", "decode_json"]
