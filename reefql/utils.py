"""Identifier case conversion used for migration and model names."""
from __future__ import annotations

import re

_CAMEL_BOUNDARY = re.compile(r"([^A-Z_])([A-Z])")


def to_snake_case(camel_case: str) -> str:
    """Convert ``CamelCase`` to ``snake_case``."""
    return _CAMEL_BOUNDARY.sub(r"\1_\2", camel_case).lower()


def to_camel_case(snake_case: str, capitalize_first: bool = True) -> str:
    """Convert ``snake_case`` to ``CamelCase`` (or ``camelCase``)."""
    camel = "".join(piece[:1].upper() + piece[1:] for piece in snake_case.split("_"))
    if capitalize_first:
        return camel
    return camel[:1].lower() + camel[1:]
