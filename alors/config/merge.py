"""Layered configuration merging.

This is the only place precedence rules live. A layer overrides exactly the
fields it sets and inherits everything else from the base.
"""

import logging
from typing import Any

from .schema import Config, ConfigLayer, LIST_FIELDS

logger = logging.getLogger(__name__)

# Plain "set wins" fields; backend and system_prompt are handled separately
SCALAR_FIELDS = (
    "model",
    "timeout_seconds",
    "max_iterations",
    "max_read_lines",
    "terminal_bell",
    "show_system_prompt",
    "debug_tool_calls",
    "auto_execute",
    "print_messages",
    "base_url",
)


def merge(base: Config, layer: ConfigLayer) -> Config:
    """Apply ``layer`` on top of ``base`` and return the result.

    Rules:
        - scalar fields: a set value replaces the base value
        - list fields: a non-empty list replaces the base list wholesale,
          an empty list is treated as unset (it never clears)
        - backend: also resets ``base_url`` to the backend's default, unless
          the same layer sets ``base_url``
        - system_prompt: a blank or whitespace-only value clears it to None

    ``base`` is never modified.
    """
    update: dict[str, Any] = {}

    if layer.backend is not None:
        update["backend"] = layer.backend
        if layer.base_url is None:
            update["base_url"] = layer.backend.config().base_url

    if layer.system_prompt is not None:
        update["system_prompt"] = layer.system_prompt if layer.system_prompt.strip() else None

    for name in SCALAR_FIELDS:
        value = getattr(layer, name)
        if value is not None:
            update[name] = value

    for name in LIST_FIELDS:
        values = getattr(layer, name)
        if values:
            update[name] = tuple(values)

    if not update:
        return base

    logger.debug(f"Layer overrides: {', '.join(sorted(update))}")
    return base.model_copy(update=update)


def merge_layers(base: Config, *layers: ConfigLayer) -> Config:
    """Merge several layers in order, later layers winning."""
    for layer in layers:
        base = merge(base, layer)
    return base
