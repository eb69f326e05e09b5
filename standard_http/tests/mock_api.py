"""
Mock API routes, served through httpx.MockTransport:

    /api                        envelope; ?status= and ?message= shape it
    /api-response-empty         empty 200 body
    /api-response-not-standard  object without a ``status`` field
    anything else               404

A callback query parameter turns the body into a JSONP script.
"""
from __future__ import annotations

import json

import httpx

BASE_URL = "http://test"


def _body(request: httpx.Request) -> dict | None:
    params = request.url.params
    path = request.url.path
    if path == "/api":
        return {
            "status": int(params.get("status") or 0),
            "data": "data",
            "statusInfo": {"message": params.get("message", ""), "detail": ""},
        }
    if path == "/api-response-not-standard":
        return {
            "code": int(params.get("code") or 0),
            "res": "data",
            "message": params.get("message", ""),
        }
    return None


def api_handler(request: httpx.Request, callback_param: str = "callback") -> httpx.Response:
    if request.url.path == "/api-response-empty":
        return httpx.Response(200, text="")
    body = _body(request)
    if body is None:
        return httpx.Response(404, text="Not Found")
    callback = request.url.params.get(callback_param)
    if callback:
        script = f"/**/ typeof {callback} === 'function' && {callback}({json.dumps(body)});"
        return httpx.Response(
            200, text=script, headers={"content-type": "text/javascript"}
        )
    return httpx.Response(200, json=body)
