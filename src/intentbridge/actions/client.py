"""
Remote action client.

Sends one JSON-RPC 2.0 call per request to the action server and
normalizes the outcome. There is no batching and no retry: a failed call
may already have had side effects on the server.
"""

import logging
import uuid
from typing import Any, Optional

import httpx

from intentbridge.actions.exceptions import NotConnectedError
from intentbridge.actions.models import ActionRequest, ActionResult

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
DEFAULT_ERROR = "Remote action request failed"
TRANSPORT_ERROR = "Failed to communicate with remote action server"


class RemoteActionClient:
    """JSON-RPC client for the remote action server.

    The bound base address is shared read-only by concurrent requests;
    each request builds its own payload and id.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        rpc_path: str = "/rpc",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            timeout: Per-request timeout in seconds
            rpc_path: Path of the JSON-RPC endpoint under the base URL
            transport: Optional httpx transport (used by tests)
        """
        self._timeout = timeout
        self._rpc_path = rpc_path
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._server_url: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        """Whether a base address is bound."""
        return self._client is not None

    @property
    def server_url(self) -> Optional[str]:
        return self._server_url

    async def connect(self, url: str) -> None:
        """Bind the client to a base address.

        Reachability is not checked here; the first request proves it.

        Args:
            url: Base URL of the action server
        """
        if self._client is not None:
            await self._client.aclose()

        self._server_url = url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._server_url,
            timeout=self._timeout,
            headers={"Content-Type": "application/json"},
            transport=self._transport,
        )
        logger.info(f"Remote action client bound to {self._server_url}")

    async def request(self, req: ActionRequest) -> ActionResult:
        """Issue one remote call.

        Args:
            req: Method, params and context to send

        Returns:
            ActionResult; failures are reported in it, never raised

        Raises:
            NotConnectedError: If connect() has not been called
        """
        if self._client is None:
            raise NotConnectedError()

        payload: dict[str, Any] = {
            "jsonrpc": JSONRPC_VERSION,
            "id": uuid.uuid4().hex,
            "method": req.method,
            "params": req.params,
            "context": req.context,
        }
        logger.debug(f"Remote action request: {req.method} {req.params}")

        try:
            response = await self._client.post(self._rpc_path, json=payload)
        except httpx.TimeoutException:
            logger.error(f"Remote action {req.method} timed out after {self._timeout}s")
            return ActionResult.failed(f"Request timed out after {self._timeout:g}s")
        except httpx.HTTPError as e:
            logger.error(f"Remote action request error: {e}")
            return ActionResult.failed(str(e) or TRANSPORT_ERROR)

        return self._parse_response(req.method, response)

    def _parse_response(self, method: str, response: httpx.Response) -> ActionResult:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("error"):
            error = body["error"]
            message = error.get("message") if isinstance(error, dict) else error
            message = str(message) if message is not None else None
            logger.warning(f"Remote action {method} returned error: {message}")
            return ActionResult.failed(message or DEFAULT_ERROR)

        if response.status_code >= 400:
            logger.error(f"Remote action {method} failed with HTTP {response.status_code}")
            return ActionResult.failed(
                f"Request failed with status code {response.status_code}"
            )

        if not isinstance(body, dict):
            logger.error(f"Remote action {method} returned a non-JSON-RPC body")
            return ActionResult.failed("Invalid response from remote action server")

        logger.debug(f"Remote action response: {body}")
        return ActionResult.ok(body.get("result"))

    async def disconnect(self) -> None:
        """Clear the bound address. Safe to call multiple times."""
        if self._client is None:
            return

        client, self._client = self._client, None
        self._server_url = None
        await client.aclose()
        logger.info("Remote action client disconnected")
