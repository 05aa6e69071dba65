"""Forwarding of tool calls to the IDE."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import (
    InvocationError,
    NoEndpoint,
    ProtocolViolation,
    TransportFailure,
)
from ..models.tools import Invocation, InvocationResult
from ..state import BridgeState

logger = logging.getLogger(__name__)


def translate_envelope(payload: Any) -> InvocationResult:
    """Map the IDE's ``{status, error}`` envelope to an invocation result.

    Exactly one of ``status`` and ``error`` must be a string and the other
    null.

    Raises:
        ProtocolViolation: For any other shape
    """
    if not isinstance(payload, dict):
        raise ProtocolViolation(
            f"Expected a JSON object from the IDE, got {type(payload).__name__}"
        )

    status = payload.get("status")
    error = payload.get("error")

    if isinstance(status, str) and error is None:
        return InvocationResult(text=status, is_error=False)
    if status is None and isinstance(error, str):
        return InvocationResult(text=error, is_error=True)

    if status is None and error is None:
        raise ProtocolViolation("IDE response has neither 'status' nor 'error'")
    if status is not None and error is not None:
        raise ProtocolViolation("IDE response has both 'status' and 'error' set")
    raise ProtocolViolation(
        "IDE response fields have unexpected types: "
        f"status={type(status).__name__}, error={type(error).__name__}"
    )


class CallDispatcher:
    """Sends a single tool invocation to the current endpoint.

    Failures are reported once, as error results. There is no retry here.
    """

    def __init__(self, client: httpx.AsyncClient, state: BridgeState) -> None:
        self.client = client
        self.state = state

    async def invoke(
        self, tool_name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> InvocationResult:
        invocation = Invocation(tool_name=tool_name, arguments=arguments or {})
        try:
            return await self._dispatch(invocation)
        except InvocationError as e:
            logger.warning("Tool call %s failed: %s", tool_name, e)
            status = e.status if isinstance(e, TransportFailure) else None
            return InvocationResult.error(str(e), status=status)

    async def _dispatch(self, invocation: Invocation) -> InvocationResult:
        endpoint = self.state.endpoint
        if endpoint is None:
            raise NoEndpoint()

        url = endpoint.url_for(invocation.tool_name)
        logger.debug(
            "ENDPOINT: %s | Tool name: %s | args: %s",
            endpoint,
            invocation.tool_name,
            json.dumps(invocation.arguments),
        )

        try:
            response = await self.client.post(url, json=invocation.arguments)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportFailure(f"Request to {url!r} failed: {e}") from e

        if not response.is_success:
            raise TransportFailure.from_status(response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ProtocolViolation(f"IDE response is not valid JSON: {e}") from e

        result = translate_envelope(payload)
        logger.debug("Tool %s returned (is_error=%s)", invocation.tool_name, result.is_error)
        return result
