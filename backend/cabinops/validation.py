# Overview: Request payload parsing helpers for the JSON API.

from __future__ import annotations

from typing import Any


class ValidationError(ValueError):
    """400-level input problem."""


def require_json_object(data: Any) -> dict:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_str(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required")
    return value.strip()


def optional_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def _coerce_int(key: str, value: Any) -> int:
    # bool is a subclass of int
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or not stripped.lstrip("-").isdigit():
            raise ValidationError(f"{key} must be an integer")
        return int(stripped)
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    raise ValidationError(f"{key} must be an integer")


def require_int(data: dict, key: str) -> int:
    if data.get(key) is None:
        raise ValidationError(f"{key} is required")
    return _coerce_int(key, data[key])


def optional_int(data: dict, key: str) -> int | None:
    if data.get(key) is None:
        return None
    return _coerce_int(key, data[key])


def require_dict(data: dict, key: str) -> dict:
    value = data.get(key)
    if not isinstance(value, dict):
        raise ValidationError(f"{key} must be an object")
    return value
