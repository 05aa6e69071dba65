"""Liveness probe against a candidate IDE endpoint."""

from __future__ import annotations

import logging

import httpx

from ..utils.logging import preview
from .types import Endpoint, ProbeResult

logger = logging.getLogger(__name__)

LIST_TOOLS_PATH = "list_tools"


class LivenessProber:
    """Issues one read-only request against the backend's tool listing.

    The response body is returned verbatim as a fingerprint. It is never
    parsed here; callers only compare fingerprints for equality.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def probe(self, endpoint: Endpoint) -> ProbeResult:
        url = endpoint.url_for(LIST_TOOLS_PATH)
        logger.debug("Sending test request to %s", url)

        try:
            response = await self.client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("Probe of %s failed: %s", url, e)
            return ProbeResult(endpoint=endpoint, alive=False)

        if not response.is_success:
            logger.debug(
                "Probe of %s failed with status %s", url, response.status_code
            )
            return ProbeResult(
                endpoint=endpoint, alive=False, status=response.status_code
            )

        body = response.text
        logger.debug("Received response from %s: %s", url, preview(body))
        return ProbeResult(
            endpoint=endpoint,
            alive=True,
            fingerprint=body,
            status=response.status_code,
        )
