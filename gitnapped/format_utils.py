"""
Output format utilities for gitnapped.

Serializes report dictionaries as JSON or YAML for machine consumption.
"""

import json
from typing import Any, Dict

import yaml

FORMATS = ('table', 'json', 'yaml')


def format_json(data: Dict[str, Any]) -> str:
    """Format data as an indented JSON document."""
    return json.dumps(data, ensure_ascii=False, indent=2)


def format_yaml(data: Dict[str, Any]) -> str:
    """Format data as YAML."""
    return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)


def format_output(data: Dict[str, Any], format: str) -> str:
    """
    Format data according to the specified format.

    Args:
        data: Dictionary to format
        format: Output format (json, yaml)

    Returns:
        Formatted string
    """
    if format == "json":
        return format_json(data)
    if format == "yaml":
        return format_yaml(data)
    raise ValueError(f"Unknown format: {format}")
