"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "tstit report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "plans"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["total", "passed", "failed", "duration_s"],
            "properties": {
                "total": {"type": "integer"},
                "passed": {"type": "integer"},
                "failed": {"type": "integer"},
                "duration_s": {"type": "number"},
            },
        },
        "plans": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "status", "state", "duration_ms"],
                "properties": {
                    "id": {"type": "string"},
                    "status": {"type": "string", "enum": ["passed", "failed"]},
                    "state": {"type": "string"},
                    "duration_ms": {"type": "number"},
                    "assigned": {
                        "type": "object",
                        "additionalProperties": {"type": "string"},
                    },
                    "error": {
                        "type": "object",
                        "required": ["kind", "message", "stage"],
                        "properties": {
                            "kind": {"type": "string"},
                            "message": {"type": "string"},
                            "stage": {"type": ["string", "null"]},
                            "details": {"type": "object"},
                        },
                    },
                },
            },
        },
    },
}
