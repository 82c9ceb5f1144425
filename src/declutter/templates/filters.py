"""Filter matching used by template application."""

from __future__ import annotations

import re
from typing import Iterable, Sequence, Union

from declutter.catalog.models import Asset

from .models import Filter

SIZE_UNITS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}
SIZE_TOLERANCE_BYTES = 1024
DURATION_TOLERANCE_SECONDS = 1.0

_SIZE_PATTERN = re.compile(r"^([\d.]+)\s*([A-Z]+)$", re.IGNORECASE)


def parse_size(value: Union[str, int, float]) -> int:
    """Convert a size such as ``"100MB"`` to bytes.

    Numbers are taken as bytes. Strings that do not parse resolve to ``0``;
    unknown units count as bytes.
    """
    if isinstance(value, (int, float)):
        return int(value)
    match = _SIZE_PATTERN.match(value.strip())
    if not match:
        return 0
    try:
        amount = float(match.group(1))
    except ValueError:
        return 0
    return int(amount * SIZE_UNITS.get(match.group(2).upper(), 1))


def compare_size(asset_size: int, operator: str, value: Union[str, int, float]) -> bool:
    """Compare an asset size in bytes against a filter value; ``=`` allows 1 KB slack."""
    target = parse_size(value)
    if operator == ">":
        return asset_size > target
    if operator == "<":
        return asset_size < target
    if operator == ">=":
        return asset_size >= target
    if operator == "<=":
        return asset_size <= target
    if operator == "=":
        return abs(asset_size - target) < SIZE_TOLERANCE_BYTES
    return False


def compare_duration(
    asset_duration: float | None, operator: str, value: Union[str, int, float]
) -> bool:
    """Compare a duration in seconds; assets without a duration never match."""
    if not asset_duration:
        return False
    try:
        target = float(value)
    except (TypeError, ValueError):
        return False
    if operator == ">":
        return asset_duration > target
    if operator == "<":
        return asset_duration < target
    if operator == ">=":
        return asset_duration >= target
    if operator == "<=":
        return asset_duration <= target
    if operator == "=":
        return abs(asset_duration - target) < DURATION_TOLERANCE_SECONDS
    return False


def _match_name(name: str, operator: str, value: str) -> bool:
    name = name.lower()
    value = value.lower()
    if operator in ("=", "equals"):
        return name == value
    if operator == "startsWith":
        return name.startswith(value)
    if operator == "endsWith":
        return name.endswith(value)
    return value in name


def matches_filter(asset: Asset, rule: Filter) -> bool:
    """Return True when ``asset`` satisfies a single filter."""
    if rule.type == "name":
        return _match_name(asset.name, rule.operator, str(rule.value))
    if rule.type == "type":
        return asset.type == rule.value
    if rule.type == "size":
        return compare_size(asset.size, rule.operator, rule.value)
    if rule.type == "duration":
        return compare_duration(asset.duration, rule.operator, rule.value)
    if rule.type == "tag":
        return rule.value in asset.tags
    return False


def matches_any(asset: Asset, rules: Iterable[Filter]) -> bool:
    """Return True when ``asset`` satisfies at least one filter."""
    return any(matches_filter(asset, rule) for rule in rules)


def filter_assets(assets: Sequence[Asset], rules: Sequence[Filter]) -> list[Asset]:
    """Return the assets matching any of ``rules``, preserving order."""
    return [asset for asset in assets if matches_any(asset, rules)]


__all__ = [
    "SIZE_UNITS",
    "compare_duration",
    "compare_size",
    "filter_assets",
    "matches_any",
    "matches_filter",
    "parse_size",
]
