"""
JSON Schema describing a declarative machine definition.

Recognised option shapes:
    states:      no-op token      {"name", "regex"}
                 replacement      {"name", "regex", "replacement"}
                 callback         {"name", "regex", "callback"}
    transitions: single target    {"from", "to": "NAME"}
                 guarded targets  {"from", "to": ["A", "B"], "guard": ...}
"""

import re

REGEX_FLAGS = ["IGNORECASE", "MULTILINE", "DOTALL", "VERBOSE", "ASCII"]


def regex_flags(names) -> int:
    """Combine ``re`` flag names from a config entry into one flags value."""
    flags = 0
    for name in names:
        flags |= getattr(re, name)
    return flags


GUARD_SCHEMA = {
    "oneOf": [
        {"type": "string", "minLength": 1},
        {
            "type": "object",
            "required": ["type"],
            "properties": {
                "type": {"type": "string", "minLength": 1},
                "groups": {
                    "type": "object",
                    "additionalProperties": {"type": "string"},
                },
                "open": {"type": "string"},
                "close": {"type": "string"},
                "exit": {"type": "string"},
            },
            "additionalProperties": False,
        },
    ]
}

STATE_SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "regex": {"type": "string"},
        "flags": {
            "type": "array",
            "items": {"enum": REGEX_FLAGS},
            "uniqueItems": True,
        },
        "replacement": {"type": "string"},
        "callback": {"type": "string", "minLength": 1},
        "end_of_stream": {"type": "string", "minLength": 1},
    },
    "not": {"required": ["replacement", "callback"]},
    "additionalProperties": False,
}

TRANSITION_SCHEMA = {
    "type": "object",
    "required": ["from", "to"],
    "properties": {
        "from": {"type": "string", "minLength": 1},
        "to": {
            "oneOf": [
                {"type": "string", "minLength": 1},
                {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1},
                    "minItems": 1,
                },
            ]
        },
        "guard": GUARD_SCHEMA,
    },
    "additionalProperties": False,
}

MACHINE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "regexflow machine",
    "type": "object",
    "required": ["states"],
    "properties": {
        "name": {"type": "string"},
        "initial": {"type": "string", "minLength": 1},
        "max_match_length": {"type": "integer", "minimum": 1},
        "look_ahead": {"type": "integer", "minimum": 1},
        "states": {"type": "array", "items": STATE_SCHEMA, "minItems": 1},
        "transitions": {"type": "array", "items": TRANSITION_SCHEMA},
    },
    "additionalProperties": False,
}
