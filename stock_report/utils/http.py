"""HTTP utilities"""

from typing import Optional

import httpx

USER_AGENT = "TWStockReport/0.1.0"


def create_http_client(
    timeout: float = 120.0,
    connect_timeout: float = 30.0,
    headers: Optional[dict[str, str]] = None,
) -> httpx.Client:
    """Create an HTTP client for LLM API calls.

    Grounded generation with web search routinely takes more than a minute,
    so the read timeout is generous while connect stays short.

    Args:
        timeout: Overall request timeout in seconds
        connect_timeout: Connect timeout in seconds
        headers: Additional headers

    Returns:
        Configured httpx.Client
    """
    default_headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }
    if headers:
        default_headers.update(headers)

    return httpx.Client(
        timeout=httpx.Timeout(timeout, connect=connect_timeout),
        headers=default_headers,
        follow_redirects=True,
    )


def backoff_delay(attempt: int, base: float = 2.0, cap: float = 30.0) -> float:
    """Exponential backoff delay for a zero-based attempt number."""
    return min(base ** attempt, cap)
