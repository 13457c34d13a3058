"""JSON wire format shared by the Socket.IO and stream transports."""

import json
from typing import Optional, Union


class MalformedMessage(ValueError):
    """Inbound frame that cannot be turned into a typed message."""


def decode_message(raw: Union[str, bytes, dict, None], default_type: Optional[str] = None) -> dict:
    """Turn an inbound frame into a message dict with a string ``type``.

    ``raw`` may be a JSON text frame or an already-decoded dict (Socket.IO
    delivers payloads decoded). ``default_type`` fills in ``type`` for
    event-named Socket.IO messages such as ``move``.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise MalformedMessage(f"invalid utf-8: {exc}")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise MalformedMessage(f"invalid json: {exc}")
    if raw is None and default_type:
        raw = {}
    if not isinstance(raw, dict):
        raise MalformedMessage(f"expected a JSON object, got {type(raw).__name__}")
    message = dict(raw)
    if default_type:
        message['type'] = default_type
    if not isinstance(message.get('type'), str):
        raise MalformedMessage('message has no type')
    return message


def encode_frame(event: dict) -> bytes:
    """Serialise one outbound event as a newline-terminated JSON line."""
    return (json.dumps(event, separators=(',', ':')) + '\n').encode('utf-8')
