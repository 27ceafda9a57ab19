from __future__ import annotations

"""Async HTTP helper with bounded timeout and limited retries.

Rate providers share one ``httpx.AsyncClient`` per cascade run; each call is
bounded by the client's timeout so a hung upstream only costs that provider's
slot before the cascade moves on.
"""
import asyncio
from typing import Any, Dict, Optional

import httpx


class HttpError(Exception):
    """Transport failure, non-2xx status or a non-JSON body.

    ``status_code`` and ``payload`` are kept when the server answered, so
    callers can look at error bodies (e.g. an invalid-key marker).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


def make_client(
    timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        transport=transport,
        headers={"Accept": "application/json"},
        follow_redirects=True,
    )


def _decode(resp: httpx.Response) -> Optional[Dict[str, Any]]:
    try:
        data = resp.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    retries: int = 0,
    backoff: float = 0.5,
) -> Dict[str, Any]:
    last_err = HttpError(f"No request attempted for {url}")
    for attempt in range(retries + 1):
        try:
            resp = await client.get(url, params=params)
        except httpx.HTTPError as e:  # covers timeouts and connection errors
            last_err = HttpError(f"{type(e).__name__} for {url}: {e}")
        else:
            payload = _decode(resp)
            if resp.is_success and payload is not None:
                return payload
            if resp.is_success:
                last_err = HttpError(
                    f"Malformed JSON body from {url}", status_code=resp.status_code
                )
            else:
                last_err = HttpError(
                    f"HTTP {resp.status_code} for {url}",
                    status_code=resp.status_code,
                    payload=payload,
                )
                # Client errors will not improve on retry
                if resp.status_code < 500 and resp.status_code != 429:
                    break
        if attempt < retries:
            await asyncio.sleep(backoff * (2**attempt))
    raise last_err
