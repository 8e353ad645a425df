"""
Helper functions shared by scenarios.
"""

import re
from typing import Dict

from syndesis_qe.models.syndesis import Action, Connector

_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9]+")


def find_action(connector: Connector, connector_prefix: str) -> Action:
    """
    Find the action of a connector by its camel connector prefix.

    Raises:
        LookupError: If the connector has no such action
    """
    for action in connector.actions:
        if action.camel_connector_prefix == connector_prefix:
            return action
    raise LookupError(f"Connector {connector.id} has no action {connector_prefix}")


def property_map(*values: object) -> Dict[str, str]:
    """
    Build a string map from alternating keys and values.

    property_map("k1", "v1", "k2", "v2") -> {"k1": "v1", "k2": "v2"}
    A trailing key without a value is ignored.
    """
    return {str(values[i]): str(values[i + 1]) for i in range(0, len(values) - 1, 2)}


def sanitize_name(name: str) -> str:
    """Turn a display name into the slug the platform uses for resource names."""
    return _INVALID_NAME_CHARS.sub("-", name.lower()).strip("-")
