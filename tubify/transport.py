from __future__ import annotations

import json
from typing import Any

import requests

from .errors import TransportError


def collect_json(response: requests.Response, chunk_size: int = 8192) -> Any:
    """Read a streamed response body to the end and parse it as one JSON value.

    Transport failures while streaming surface as ``TransportError``; a body
    that is not valid UTF-8 JSON raises ``json.JSONDecodeError``.
    """
    chunks = []
    try:
        for chunk in response.iter_content(chunk_size=chunk_size):
            if chunk:
                chunks.append(chunk)
    except requests.RequestException as err:
        raise TransportError(f"Error reading response from {response.url}: {err}") from err
    finally:
        response.close()
    body = b"".join(chunks)
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as err:
        raise json.JSONDecodeError(
            f"Response body is not valid UTF-8 ({err.reason})", body.decode("latin-1"), err.start
        ) from err
    return json.loads(text)


__all__ = ["collect_json"]
