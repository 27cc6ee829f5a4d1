"""OpenAPI customization utilities.

Adds tag descriptions and documents the error body shared by all comment
endpoints, keeping documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Comments",
        "description": "List, create and delete comments of a post.",
    },
    {
        "name": "Health",
        "description": "Liveness check.",
    },
]

ERROR_SCHEMA = {
    "type": "object",
    "properties": {
        "error": {"type": "string"},
        "code": {"type": "string"},
        "request_id": {"type": "string", "nullable": True},
    },
    "required": ["error"],
}

# Status codes each method of /api/comments may answer with besides success
_ERROR_RESPONSES = {
    "get": {"400": "Missing slug", "500": "Storage failure"},
    "post": {
        "400": "Spam detected, missing fields or invalid body",
        "429": "Too many requests",
        "500": "Storage failure",
    },
    "delete": {"400": "Missing id", "500": "Storage failure"},
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and error responses."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        components = schema.setdefault("components", {})
        components.setdefault("schemas", {}).setdefault("ErrorResponse", ERROR_SCHEMA)

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        comments_path = schema.get("paths", {}).get("/api/comments", {})
        for method, errors in _ERROR_RESPONSES.items():
            operation = comments_path.get(method)
            if not isinstance(operation, dict):
                continue
            responses = operation.setdefault("responses", {})
            # malformed bodies are answered with 400, never 422
            responses.pop("422", None)
            for status_code, description in errors.items():
                responses[status_code] = {
                    "description": description,
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/ErrorResponse"}
                        }
                    },
                }

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
