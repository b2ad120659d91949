"""NEAR JSON-RPC client for contract view calls.

View calls go through the `query` method with request_type
`call_function`. Arguments travel base64-encoded JSON; the result comes back
as a list of byte values holding the UTF-8 JSON return value.
"""

import base64
import itertools
import json
from types import TracebackType
from typing import Any

import httpx
import structlog

from review_feed.core.errors import (
    RemoteExecutionError,
    ResponseFormatError,
    TransportError,
)

logger = structlog.get_logger()

# RPC error causes that mean the node ran (or tried to run) the view call
# and the contract side failed.
_EXECUTION_CAUSES = frozenset(
    {
        "CONTRACT_EXECUTION_ERROR",
        "NO_CONTRACT_CODE",
        "UNKNOWN_ACCOUNT",
        "INVALID_ACCOUNT",
    }
)


def encode_args(args: dict[str, Any]) -> str:
    """Encode view-call arguments as base64 JSON."""
    raw = json.dumps(args, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_result(raw: Any, *, method: str | None = None) -> Any:
    """Decode a call_function result (list of byte values) as JSON.

    Raises:
        ResponseFormatError: If the bytes are missing or not valid JSON.
    """
    if not isinstance(raw, list):
        raise ResponseFormatError(
            f"Expected a byte list in call_function result, got {type(raw).__name__}",
            method=method,
        )
    try:
        return json.loads(bytes(raw).decode("utf-8"))
    except (ValueError, TypeError) as e:
        raise ResponseFormatError(
            f"Undecodable call_function result: {e}", method=method
        ) from e


def _classify_rpc_error(error: dict[str, Any], method: str) -> Exception:
    """Map a JSON-RPC error object to the source error taxonomy.

    Returns the error instance (does not raise).
    """
    cause = error.get("cause") or {}
    cause_name = cause.get("name") if isinstance(cause, dict) else None
    detail = error.get("data") or error.get("message") or "unknown RPC error"
    if cause_name in _EXECUTION_CAUSES:
        return RemoteExecutionError(f"{cause_name}: {detail}", method=method)
    name = cause_name or error.get("name")
    return TransportError(f"RPC error {name}: {detail}", method=method)


class NearRpcClient:
    """Calls read-only methods on one NEAR contract.

    Args:
        rpc_url: JSON-RPC endpoint of a NEAR node.
        contract_name: Account id the contract is deployed to.
        timeout_seconds: Per-request HTTP timeout.
        http_client: Optional preconfigured client. When given, the caller
            owns it and aclose() leaves it open.
    """

    def __init__(
        self,
        rpc_url: str,
        contract_name: str,
        *,
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._rpc_url = rpc_url
        self._contract_name = contract_name
        self._timeout = timeout_seconds
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self._ids = itertools.count(1)

    @property
    def contract_name(self) -> str:
        return self._contract_name

    async def view(self, method: str, args: dict[str, Any] | None = None) -> Any:
        """Call a contract view method and return its decoded JSON result.

        Args:
            method: View method name on the contract.
            args: JSON-serializable method arguments.

        Returns:
            The method's return value.

        Raises:
            TransportError: On network failure, HTTP error status, or an
                RPC-level error unrelated to contract execution.
            RemoteExecutionError: If the contract call itself failed.
            ResponseFormatError: If the response cannot be decoded.
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "query",
            "params": {
                "request_type": "call_function",
                "finality": "optimistic",
                "account_id": self._contract_name,
                "method_name": method,
                "args_base64": encode_args(args or {}),
            },
        }

        try:
            resp = await self._client.post(
                self._rpc_url, json=payload, timeout=self._timeout
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "near_rpc_http_error",
                method=method,
                status_code=e.response.status_code,
            )
            raise TransportError(
                f"RPC endpoint returned HTTP {e.response.status_code}", method=method
            ) from e
        except httpx.HTTPError as e:
            logger.warning("near_rpc_transport_error", method=method, error=str(e))
            raise TransportError(f"RPC request failed: {e}", method=method) from e

        try:
            body = resp.json()
        except ValueError as e:
            raise ResponseFormatError(
                "RPC response is not valid JSON", method=method
            ) from e
        if not isinstance(body, dict):
            raise ResponseFormatError("RPC response is not an object", method=method)

        if body.get("error") is not None:
            error = body["error"]
            if not isinstance(error, dict):
                error = {"message": str(error)}
            logger.warning("near_rpc_error", method=method, error=error)
            raise _classify_rpc_error(error, method)

        result = body.get("result")
        if not isinstance(result, dict):
            raise ResponseFormatError(
                "RPC response has no result object", method=method
            )

        # Older nodes report contract failures inside a successful response.
        if result.get("error"):
            logger.warning("near_view_failed", method=method, error=result["error"])
            raise RemoteExecutionError(str(result["error"]), method=method)

        value = decode_result(result.get("result"), method=method)
        logger.debug(
            "near_view_ok",
            method=method,
            block_height=result.get("block_height"),
        )
        return value

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "NearRpcClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
