"""Inbound frame decoding.

Clients send one of three frames:

    {"type": "join", "name": "Alice"}
    {"type": "message", "content": "hello"}
    {"event": "ping"}

Each frame is decoded once into a JoinFrame, PostFrame or KeepaliveFrame.
Anything else raises FrameError.
"""

import json
from dataclasses import dataclass
from typing import Any, Union

KEEPALIVE_TEXT = '{"event":"ping"}'


class FrameError(ValueError):
    """Raised for a frame that cannot be decoded into a known variant."""


@dataclass(frozen=True)
class JoinFrame:
    name: str


@dataclass(frozen=True)
class PostFrame:
    content: str


@dataclass(frozen=True)
class KeepaliveFrame:
    pass


Frame = Union[JoinFrame, PostFrame, KeepaliveFrame]


def decode_frame(raw: Any) -> Frame:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise FrameError(f'frame is not valid utf-8: {exc}') from exc
    if isinstance(raw, str):
        if raw == KEEPALIVE_TEXT:
            return KeepaliveFrame()
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise FrameError(f'frame is not valid JSON: {exc}') from exc
    if not isinstance(raw, dict):
        raise FrameError(f'frame must be a JSON object, got {type(raw).__name__}')

    if raw.get('event') == 'ping':
        return KeepaliveFrame()

    kind = raw.get('type')
    if kind == 'join':
        name = raw.get('name')
        if not isinstance(name, str) or not name.strip():
            raise FrameError('join frame needs a non-empty "name" string')
        return JoinFrame(name=name)
    if kind == 'message':
        content = raw.get('content')
        if not isinstance(content, str):
            raise FrameError('message frame needs a "content" string')
        return PostFrame(content=content)
    raise FrameError(f'unknown frame type: {kind!r}')
