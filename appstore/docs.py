"""OpenAPI 3.0 description of the App resource service.

Returns a Python dict (compatible with ``json.dumps``) describing every route
registered by ``appstore.service``.  The service serves it at
``/apidocs.json``::

    from appstore.docs import build_spec
    spec = build_spec(server_url="http://localhost:8080")
"""

from typing import Any, Dict

from appstore.codec import CONSUMES, PRODUCES


def _ref(name: str) -> Dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def _content(schema: Dict, mimetypes) -> Dict[str, Any]:
    return {mimetype: {"schema": schema} for mimetype in mimetypes}


def _resp(description: str, schema: Dict = None) -> Dict[str, Any]:
    r: Dict[str, Any] = {"description": description}
    if schema:
        r["content"] = _content(schema, PRODUCES)
    return r


def _error(description: str) -> Dict[str, Any]:
    return {
        "description": description,
        "content": {"text/plain": {"schema": {"type": "string"}}},
    }


def _app_id_param() -> Dict[str, Any]:
    return {
        "name": "app-id",
        "in": "path",
        "required": True,
        "description": "identifier of the app",
        "schema": {"type": "string"},
    }


def _request_body() -> Dict[str, Any]:
    return {"required": True, "content": _content(_ref("AppRequest"), CONSUMES)}


def build_spec(server_url: str = "/") -> Dict[str, Any]:
    """Return the full OpenAPI 3.0 specification dict."""
    return {
        "openapi": "3.0.3",
        "info": {
            "title": "App store",
            "version": "0.1.0",
            "description": "Manage Apps.",
        },
        "servers": [{"url": server_url}],
        "tags": [{"name": "apps", "description": "Manage Apps"}],
        "paths": _build_paths(),
        "components": {"schemas": _build_schemas()},
    }


def _build_schemas() -> Dict[str, Any]:
    return {
        "App": {
            "type": "object",
            "xml": {"name": "App"},
            "required": ["id", "label", "description"],
            "properties": {
                "id": {"type": "string", "xml": {"name": "Id"}},
                "label": {"type": "string", "xml": {"name": "Label"}},
                "description": {"type": "string", "xml": {"name": "Description"}},
            },
        },
        # Fields left out (or null) are not changed by PATCH.
        "AppRequest": {
            "type": "object",
            "properties": {
                "label": {"type": "string", "nullable": True, "xml": {"name": "Label"}},
                "description": {
                    "type": "string",
                    "nullable": True,
                    "xml": {"name": "Description"},
                },
            },
        },
    }


def _build_paths() -> Dict[str, Any]:
    decode_failed = _error("Request body could not be decoded")
    not_found = _error("App could not be found")
    return {
        "/apps": {
            "post": {
                "tags": ["apps"],
                "summary": "create an app",
                "operationId": "createApp",
                "requestBody": _request_body(),
                "responses": {
                    "201": _resp("Created", _ref("App")),
                    "400": _error("Label or Description missing"),
                    "415": _error("Unsupported Content-Type"),
                    "500": decode_failed,
                },
            },
        },
        "/apps/{app-id}": {
            "parameters": [_app_id_param()],
            "get": {
                "tags": ["apps"],
                "summary": "get an app",
                "operationId": "findApp",
                "responses": {"200": _resp("OK", _ref("App")), "404": not_found},
            },
            "put": {
                "tags": ["apps"],
                "summary": "update an app",
                "operationId": "updateApp",
                "requestBody": _request_body(),
                "responses": {
                    "200": _resp("OK", _ref("App")),
                    "400": _error("Label or Description missing"),
                    "404": not_found,
                    "415": _error("Unsupported Content-Type"),
                    "500": decode_failed,
                },
            },
            "patch": {
                "tags": ["apps"],
                "summary": "patch an app with partial request",
                "operationId": "patchApp",
                "requestBody": _request_body(),
                "responses": {
                    "200": _resp("OK", _ref("App")),
                    "404": not_found,
                    "415": _error("Unsupported Content-Type"),
                    "500": decode_failed,
                },
            },
            "delete": {
                "tags": ["apps"],
                "summary": "delete an app",
                "operationId": "removeApp",
                "responses": {"200": {"description": "Deleted, or never existed"}},
            },
        },
        "/check-alive": {
            "get": {
                "summary": "liveness check",
                "operationId": "checkAlive",
                "responses": {
                    "200": {
                        "description": "Service is alive",
                        "content": {"application/json": {"schema": {"type": "string"}}},
                    }
                },
            },
        },
        "/apidocs.json": {
            "get": {
                "summary": "this document",
                "operationId": "apiDocs",
                "responses": {"200": {"description": "OpenAPI 3.0 document"}},
            },
        },
    }
