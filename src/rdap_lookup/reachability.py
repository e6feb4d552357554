"""
Pre-flight checks run by the command line front end before a lookup:
does the name resolve in DNS, and does the site answer a HEAD request.
"""

import asyncio
import socket
from typing import Optional

import httpx


async def domain_exists(domain: str) -> bool:
    """Return True if the domain resolves to at least one address."""
    loop = asyncio.get_running_loop()
    try:
        records = await loop.getaddrinfo(domain, None, type=socket.SOCK_STREAM)
    except (OSError, UnicodeError):
        return False
    return bool(records)


async def site_is_reachable(
    domain: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: float = 10.0,
) -> bool:
    """Return True if a HEAD request to the site gets a 2xx answer."""
    url = domain if domain.startswith("http") else f"https://{domain}"
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=transport,
        ) as client:
            response = await client.head(url)
    except httpx.HTTPError:
        return False
    return response.is_success
