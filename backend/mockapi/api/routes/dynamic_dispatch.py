"""Dynamic Dispatch — catch-all route serving every runtime-declared endpoint.

Invariants:
    - Registered last: management routes under the same prefix take precedence
    - Bodies only read for POST / PUT; empty body is {}
    - JSON bodies must decode to an object; form bodies become flat string payloads
    - Bodies above max_body_bytes rejected with 413 before they are fully buffered
    - NaN / Infinity literals and out-of-range numbers are rejected: stored records must render as strict JSON
    - Repeated query parameters reach the router as one comma-joined string
"""

import json
import logging
import math
from typing import Any, AsyncGenerator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.formparsers import FormParser, MultiPartException, MultiPartParser
from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.config import Settings, get_settings
from mockapi.core.errors import InvalidRequestBodyError, PayloadTooLargeError
from mockapi.infrastructure.database import get_db
from mockapi.infrastructure.identifiers import IdGenerator, get_id_generator
from mockapi.services.request_router import RequestRouter

logger = logging.getLogger(__name__)
router = APIRouter(prefix=get_settings().api_prefix, tags=["dispatch"])

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
DISPATCH_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]


async def _read_limited(request: Request, max_bytes: int) -> bytes:
    """Body bytes, refusing anything above max_bytes before it is buffered."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > max_bytes:
        raise PayloadTooLargeError(max_bytes)
    raw = bytearray()
    async for chunk in request.stream():
        raw.extend(chunk)
        if len(raw) > max_bytes:
            raise PayloadTooLargeError(max_bytes)
    return bytes(raw)


async def _replay(raw: bytes) -> AsyncGenerator[bytes, None]:
    yield raw


async def _parse_form(request: Request, raw: bytes) -> dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        parser = MultiPartParser(request.headers, _replay(raw))
    else:
        parser = FormParser(request.headers, _replay(raw))
    try:
        form = await parser.parse()
    except MultiPartException as e:
        raise InvalidRequestBodyError(e.message)
    try:
        return {key: value for key, value in form.items() if isinstance(value, str)}
    finally:
        await form.close()


def _reject_constant(name: str) -> Any:
    raise InvalidRequestBodyError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise InvalidRequestBodyError(f"number {text} is out of range")
    return value


async def read_body(request: Request, max_bytes: int) -> dict[str, Any]:
    """Parse a dynamic request body into a payload dict."""
    if request.method not in ("POST", "PUT"):
        return {}
    raw = await _read_limited(request, max_bytes)
    if not raw.strip():
        return {}
    if request.headers.get("content-type", "").startswith(_FORM_TYPES):
        return await _parse_form(request, raw)
    try:
        body = json.loads(
            raw, parse_constant=_reject_constant, parse_float=_finite_float,
        )
    except ValueError as e:
        raise InvalidRequestBodyError(f"malformed JSON ({e})")
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidRequestBodyError("expected a JSON object")
    return body


def query_dict(request: Request) -> dict[str, str]:
    """One string per parameter; repeated parameters joined with ","."""
    params = request.query_params
    return {key: ",".join(params.getlist(key)) for key in params.keys()}


@router.api_route("/{declared_path:path}", methods=DISPATCH_METHODS)
async def dispatch(
    declared_path: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    ids: IdGenerator = Depends(get_id_generator),
    settings: Settings = Depends(get_settings),
):
    """Serve GET/POST/PUT/DELETE against a declared endpoint path."""
    body = await read_body(request, settings.max_body_bytes)
    result = await RequestRouter(db, ids, settings.api_prefix).dispatch(
        request.method,
        request.url.path,
        query_dict(request),
        body,
    )
    logger.debug(
        f"Dispatched {request.method} /{declared_path}",
        extra={"status_code": result.status_code},
    )
    return JSONResponse(status_code=result.status_code, content=result.body)
