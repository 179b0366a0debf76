# =============================================================================
# axel/middleware/body.py - Body Parsing Stage
# =============================================================================
# Reads the request body once, enforces the size limit and decodes JSON and
# URL-encoded payloads into request.state.body. The raw bytes are replayed to
# the rest of the app, so handlers can still call request.body()/json().
#
# request.state.body after this stage:
#   application/json, */*+json          -> dict or list
#   application/x-www-form-urlencoded   -> dict (nested for a[b]=1 keys)
#   anything else, non-empty            -> bytes
#   no body                             -> {}
# =============================================================================

import json
import logging
import re
from typing import Any
from urllib.parse import parse_qsl

from starlette.datastructures import Headers
from starlette.requests import ClientDisconnect, Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from axel.exceptions import MalformedBodyError, PayloadTooLargeError

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"
DEFAULT_CHARSET = "utf-8"
JSON_CHARSET_PREFIX = "utf-"

# Form parser ceilings
MAX_FORM_FIELDS = 1000
MAX_FORM_DEPTH = 5
MAX_FORM_ARRAY_INDEX = 20

_BRACKET_KEY = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])+)$")
_BRACKET_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


# =============================================================================
# Content Type Helpers
# =============================================================================

def parse_content_type(value: str | None) -> tuple[str, str]:
    """
    Split a Content-Type header into (media type, charset).

    Example: "application/json; charset=UTF-8" -> ("application/json", "utf-8")
    """
    if not value:
        return "", DEFAULT_CHARSET
    media_type, _, params = value.partition(";")
    charset = DEFAULT_CHARSET
    for param in params.split(";"):
        name, _, param_value = param.partition("=")
        if name.strip().lower() == "charset" and param_value.strip():
            charset = param_value.strip().strip('"').lower()
    return media_type.strip().lower(), charset


def is_json_media_type(media_type: str) -> bool:
    return media_type == JSON_MEDIA_TYPE or media_type.endswith("+json")


# =============================================================================
# Decoders
# =============================================================================

def _decode_text(body: bytes, media_type: str, charset: str) -> str:
    try:
        return body.decode(charset)
    except LookupError:
        raise MalformedBodyError(media_type, f"unsupported charset {charset!r}")
    except UnicodeDecodeError as e:
        raise MalformedBodyError(media_type, str(e))


def parse_json_body(body: bytes, media_type: str = JSON_MEDIA_TYPE, charset: str = DEFAULT_CHARSET) -> Any:
    """
    Decode a JSON body in strict mode.

    Only objects and arrays are accepted at the top level, and only UTF-8,
    UTF-16 or UTF-32 charsets. An empty body decodes to an empty dict.
    """
    if not body:
        return {}
    if not charset.startswith(JSON_CHARSET_PREFIX):
        raise MalformedBodyError(media_type, f"unsupported charset {charset!r}")
    text = _decode_text(body, media_type, charset)
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedBodyError(media_type, str(e))
    if not isinstance(value, (dict, list)):
        raise MalformedBodyError(media_type, "top-level value must be an object or array")
    return value


def _split_form_key(key: str) -> list[str]:
    """
    "user[address][city]" -> ["user", "address", "city"]
    "tags[]"              -> ["tags", ""]

    Segments past MAX_FORM_DEPTH stay together as one literal key.
    """
    match = _BRACKET_KEY.match(key)
    if not match:
        return [key]
    segments = _BRACKET_SEGMENT.findall(match.group(2))
    path = [match.group(1)] + segments[:MAX_FORM_DEPTH]
    if len(segments) > MAX_FORM_DEPTH:
        path.append("".join(f"[{s}]" for s in segments[MAX_FORM_DEPTH:]))
    return path


class _IndexedItems(dict):
    """Values collected from a[0]=..&a[1]=.. keys, keyed by int index."""


def _array_index(segment: str) -> int | None:
    if segment.isascii() and segment.isdigit() and int(segment) <= MAX_FORM_ARRAY_INDEX:
        return int(segment)
    return None


def _store_form_value(target: dict, key: Any, value: Any) -> None:
    # Repeated keys collect into a list
    if key not in target:
        target[key] = value
    elif isinstance(target[key], list):
        target[key].append(value)
    else:
        target[key] = [target[key], value]


def _child_container(target: dict, key: Any, next_segment: str) -> dict:
    """
    Container under target[key] that next_segment is assigned into.

    Whatever target[key] already holds is kept: indexed items turn into a
    plain dict when a named key shows up, and a scalar becomes the first
    item of a list next to the new container.
    """
    existing = target.get(key)
    indexed = _array_index(next_segment) is not None

    if isinstance(existing, _IndexedItems):
        if indexed:
            return existing
        converted = {str(index): item for index, item in existing.items()}
        target[key] = converted
        return converted
    if isinstance(existing, dict):
        return existing
    if isinstance(existing, list) and existing and type(existing[-1]) is dict:
        return existing[-1]

    child: dict = _IndexedItems() if indexed else {}
    if existing is None:
        target[key] = child
    elif isinstance(existing, list):
        existing.append(child)
    else:
        target[key] = [existing, child]
    return child


def _assign_form_value(target: dict, path: list[str], value: str) -> None:
    key: Any = path[0]
    rest = path[1:]
    if isinstance(target, _IndexedItems):
        key = int(key)
    if not rest:
        _store_form_value(target, key, value)
        return

    if rest[0] == "":
        items = target.get(key)
        if isinstance(items, _IndexedItems):
            # a[0]=x&a[]=y appends after the highest index
            next_index = str(max(items, default=-1) + 1)
            _assign_form_value(items, [next_index] + rest[1:], value)
            return
        if not isinstance(items, list):
            items = [] if items is None else [items]
            target[key] = items
        if len(rest) == 1:
            items.append(value)
        else:
            child: dict = {}
            items.append(child)
            _assign_form_value(child, rest[1:], value)
        return

    _assign_form_value(_child_container(target, key, rest[0]), rest, value)


def _finalize_form_value(value: Any) -> Any:
    # Indexed items become lists ordered by index, gaps dropped
    if isinstance(value, _IndexedItems):
        return [_finalize_form_value(value[index]) for index in sorted(value)]
    if isinstance(value, dict):
        return {key: _finalize_form_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_finalize_form_value(item) for item in value]
    return value


def parse_form_body(body: bytes, media_type: str = FORM_MEDIA_TYPE, charset: str = DEFAULT_CHARSET) -> dict:
    """
    Decode an application/x-www-form-urlencoded body.

    Supports the extended bracket syntax:
        "a=1&a=2"              -> {"a": ["1", "2"]}
        "user[name]=bob"       -> {"user": {"name": "bob"}}
        "tags[]=x&tags[]=y"    -> {"tags": ["x", "y"]}
        "a[0]=x&a[1]=y"        -> {"a": ["x", "y"]}
        "a=1&a[b]=2"           -> {"a": ["1", {"b": "2"}]}

    Indices above MAX_FORM_ARRAY_INDEX are treated as object keys.
    Blank values are kept as empty strings.
    """
    if not body:
        return {}
    text = _decode_text(body, media_type, charset)
    if text.count("&") + 1 > MAX_FORM_FIELDS:
        raise MalformedBodyError(media_type, f"too many parameters (max {MAX_FORM_FIELDS})")
    try:
        pairs = parse_qsl(text, keep_blank_values=True, encoding=charset, errors="strict")
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedBodyError(media_type, str(e))

    result: dict = {}
    for key, value in pairs:
        _assign_form_value(result, _split_form_key(key), value)
    return _finalize_form_value(result)


def parse_body(content_type: str | None, body: bytes) -> Any:
    """Decode a raw body according to its Content-Type header."""
    media_type, charset = parse_content_type(content_type)
    if is_json_media_type(media_type):
        return parse_json_body(body, media_type, charset)
    if media_type == FORM_MEDIA_TYPE:
        return parse_form_body(body, media_type, charset)
    return body if body else {}


# =============================================================================
# Middleware
# =============================================================================

class BodyParserMiddleware:
    """
    Pure ASGI middleware that buffers, limits and decodes the request body.

    Failures raise PayloadTooLargeError or MalformedBodyError for the error
    handling stage to turn into a response.
    """

    def __init__(self, app: ASGIApp, max_body_size: int):
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        self._check_declared_length(headers)
        body = await self._read_body(receive)

        request = Request(scope)
        request.state.body = parse_body(headers.get("content-type"), body)
        if body:
            logger.debug(f"Parsed {len(body)} byte body for {request.method} {request.url.path}")

        await self.app(scope, _replay_body(body, receive), send)

    def _check_declared_length(self, headers: Headers) -> None:
        # Reject early when the client announces an oversized body
        declared = headers.get("content-length")
        if declared is None:
            return
        try:
            length = int(declared)
        except ValueError:
            return
        if length > self.max_body_size:
            raise PayloadTooLargeError(limit=self.max_body_size, received=length)

    async def _read_body(self, receive: Receive) -> bytes:
        chunks: list[bytes] = []
        received = 0
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                raise ClientDisconnect()
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > self.max_body_size:
                raise PayloadTooLargeError(limit=self.max_body_size, received=received)
            chunks.append(chunk)
            if not message.get("more_body", False):
                return b"".join(chunks)


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """Hand the buffered body to the next app, then defer to the server."""
    replayed = False

    async def replay() -> Message:
        nonlocal replayed
        if replayed:
            return await receive()
        replayed = True
        return {"type": "http.request", "body": body, "more_body": False}

    return replay
