"""
Serialized List Parsing

The rule store keeps target ids, target tags and condition value arrays as
JSON-encoded text columns (e.g. '[1, 2, 3]' or '["vip", "wholesale"]').
These helpers decode them tolerantly: a corrupt column yields an empty list
and a warning, never an exception, so one broken rule cannot block checkout.
"""

import json
import logging

logger = logging.getLogger(__name__)


def parse_string_list(raw) -> list[str]:
    """
    Decode a serialized tag list.

    Args:
        raw: JSON text, an already decoded list, or None

    Returns:
        List of strings, empty if raw is None or unparseable

    Example:
        >>> parse_string_list('["vip", "wholesale"]')
        ['vip', 'wholesale']
        >>> parse_string_list('not json')
        []
    """
    values = _decode(raw)
    return [value for value in values if isinstance(value, str)]


def parse_id_list(raw) -> list[int]:
    """
    Decode a serialized id list.

    Integer-like strings ("12") are accepted, anything else is dropped.

    Example:
        >>> parse_id_list('[1, "2", "x"]')
        [1, 2]
    """
    ids = []
    for value in _decode(raw):
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            ids.append(value)
        elif isinstance(value, float) and value.is_integer():
            ids.append(int(value))
        elif isinstance(value, str):
            try:
                ids.append(int(value.strip()))
            except ValueError:
                continue
    return ids


def _decode(raw) -> list:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return list(raw)
    if not isinstance(raw, str):
        logger.warning(f"Unsupported serialized list type: {type(raw).__name__}")
        return []
    if raw.strip() == "":
        return []
    try:
        decoded = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning(f"Malformed serialized list ignored: {raw!r}")
        return []
    if not isinstance(decoded, list):
        logger.warning(f"Serialized value is not a list, ignored: {raw!r}")
        return []
    return decoded
