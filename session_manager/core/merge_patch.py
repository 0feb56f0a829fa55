"""
JSON merge patch (RFC 7386).

Applies a partial-update document to a stored session document. Object
members are merged recursively, null deletes, and any other value
(arrays included) replaces the target wholesale.

Dependencies: json (stdlib)
System role: Pure merge step of the session update path
"""

import copy
import json
from typing import Any

from session_manager.core.exceptions import InvalidPatchError


def parse_patch(raw: str | bytes) -> Any:
    """
    Parse a raw merge patch body.

    Args:
        raw: JSON text of the patch

    Returns:
        Any: Decoded patch value

    Raises:
        InvalidPatchError: If the body is not valid JSON or is nested too deeply
    """
    try:
        return json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise InvalidPatchError(
            "Merge patch is not valid JSON", {"error": str(e)}
        ) from e


def apply_merge_patch(base: Any, patch: Any) -> Any:
    """
    Apply patch to base and return the merged document.

    Neither argument is modified.

    Args:
        base: Current document
        patch: Decoded merge patch (see parse_patch for raw bodies)

    Returns:
        Any: Merged document
    """
    return _merge(copy.deepcopy(base), patch)


def _merge(target: Any, patch: Any) -> Any:
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)
    if not isinstance(target, dict):
        target = {}
    for name, value in patch.items():
        if value is None:
            target.pop(name, None)
        else:
            target[name] = _merge(target.get(name), value)
    return target
