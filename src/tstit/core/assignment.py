"""Capture of response fields into the variable store."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping

from .variables import VariableStore

logger = logging.getLogger(__name__)


def stringify(value: Any) -> str:
    """Render a JSON value the way it is stored in a variable."""

    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":")).replace('"', "")


def apply_assignments(
    envelope: Mapping[str, Any],
    assign: Mapping[str, str],
    store: VariableStore,
) -> Dict[str, str]:
    """Copy top-level envelope fields named in ``assign`` into ``store``.

    Fields absent from the envelope are skipped. Returns the variables written.
    """

    assigned: Dict[str, str] = {}
    for field, var_name in assign.items():
        if field not in envelope:
            logger.debug("field '%s' not in response, %s left unassigned", field, var_name)
            continue
        value = stringify(envelope[field])
        store.assign(var_name, value)
        assigned[var_name] = value
        logger.info("assigned %s to %s var", value, var_name)
    return assigned
