from __future__ import annotations

from typing import Any


def str_value(settings: dict[str, Any], key: str, default: str) -> str:
    v = settings.get(key, default)
    if v is None or (isinstance(v, str) and not v.strip()):
        return default
    return str(v)


def str_prop(key: str, *, default: str) -> property:
    def _get(self) -> str:
        return str_value(self._settings, key, default)

    return property(_get)


def int_prop(key: str, *, default: int, min_v: int | None = None, max_v: int | None = None) -> property:
    def _get(self) -> int:
        try:
            v = int(self._settings.get(key, default))
        except (TypeError, ValueError):
            v = int(default)
        if min_v is not None:
            v = max(int(min_v), v)
        if max_v is not None:
            v = min(int(max_v), v)
        return v

    return property(_get)


def float_prop(key: str, *, default: float, min_v: float | None = None) -> property:
    def _get(self) -> float:
        try:
            v = float(self._settings.get(key, default))
        except (TypeError, ValueError):
            v = float(default)
        if min_v is not None:
            v = max(float(min_v), v)
        return v

    return property(_get)


def bool_prop(key: str, *, default: bool) -> property:
    def _get(self) -> bool:
        v: Any = self._settings.get(key, default)
        if isinstance(v, str):
            return v.strip().lower() in {"1", "true", "yes", "on"}
        return bool(v)

    return property(_get)
