from __future__ import annotations

import json
import logging
from time import perf_counter
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from webapp.core.messages import get_message, is_success_code, language_from_header
from webapp.schemas.common import Envelope

_LOG = logging.getLogger("webapp.http")


def rewrite_envelope_body(body: bytes, language: str | None = None) -> tuple[int, bytes] | None:
    """Return (code, new body) for a JSON object whose `message` is an HTTP status code, else None."""
    if not body:
        return None
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    code = payload.get("message")
    if isinstance(code, bool) or not isinstance(code, int) or not 100 <= code <= 599:
        return None
    payload["message"] = get_message(code, language)
    payload["status"] = code
    payload["success"] = is_success_code(code)
    return code, json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def _rebuild(original: Response, body: bytes, status_code: int) -> Response:
    rebuilt = Response(content=body, status_code=status_code, background=original.background)
    for key, value in original.headers.raw:
        if key.lower() == b"content-length":
            continue
        rebuilt.raw_headers.append((key, value))
    return rebuilt


def install_response_envelope(app: FastAPI) -> None:
    @app.middleware("http")
    async def _response_envelope_middleware(request: Request, call_next):
        started_at = perf_counter()
        try:
            response = await call_next(request)
            chunks = []
            async for chunk in response.body_iterator:
                chunks.append(chunk if isinstance(chunk, bytes) else chunk.encode("utf-8"))
            body = b"".join(chunks)

            rewritten = rewrite_envelope_body(body, language_from_header(request.headers.get("accept-language")))
            if rewritten is None:
                final = _rebuild(response, body, response.status_code)
            else:
                code, new_body = rewritten
                final = _rebuild(response, new_body, response.status_code if is_success_code(code) else code)
        except Exception:
            _LOG.exception("Response envelope failed for %s %s", request.method, request.url.path)
            final = Response(status_code=500)

        _LOG.info(
            "%s %s status=%s duration_ms=%.2f",
            request.method,
            request.url.path,
            final.status_code,
            (perf_counter() - started_at) * 1000.0,
        )
        return final


def envelope_response(code: int, data: Any = None, language: str | None = None) -> JSONResponse:
    envelope = Envelope(
        status=int(code),
        success=is_success_code(code),
        message=get_message(code, language),
        data=data,
    )
    status_code = 200 if is_success_code(code) else int(code)
    return JSONResponse(content=jsonable_encoder(envelope, by_alias=True), status_code=status_code)
