"""HTTP clients for the peer directory services consumed by the evaluator."""
import time
from typing import Any, Optional

import httpx

from credito.config import settings
from credito.exceptions import PeerApiError
from credito.logging import get_logger, request_id_ctx
from credito import metrics

logger = get_logger(__name__)


class PeerClient:
    """
    Base client for a JSON-over-HTTP peer service.

    Every failure is raised as PeerApiError with a status code:
    the peer's own status for HTTP errors, 504 for timeouts, 503 for
    connection/transport errors and 502 for a body that is not JSON.
    """

    peer = "peer"

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the peer client.

        Args:
            base_url: Base URL of the peer service
            timeout: Per-call timeout in seconds. Defaults to settings.peer_timeout_seconds.
            transport: Optional httpx transport, used to wire services in-process
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.peer_timeout_seconds
        self.transport = transport

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        start_time = time.perf_counter()

        logger.info("peer_request_started", peer=self.peer, url=url, **params)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(url, params=params, headers=_trace_headers())

                if response.status_code == 404:
                    self._fail("not_found", start_time, status_code=404, **params)
                    raise PeerApiError(self.peer, 404, _message_from(response))

                response.raise_for_status()
                data = response.json()

            # httpx error messages embed the request URL, query string (and CPF) included
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                detail = _message_from(e.response)
                self._fail("http_error", start_time, status_code=status_code, error=f"HTTP {status_code}", **params)
                raise PeerApiError(self.peer, status_code, detail) from e

            except httpx.TimeoutException as e:
                self._fail("timeout", start_time, error=type(e).__name__, **params)
                raise PeerApiError(self.peer, 504, f"Request timed out ({type(e).__name__})") from e

            except httpx.RequestError as e:
                self._fail("connection_error", start_time, error=type(e).__name__, **params)
                raise PeerApiError(self.peer, 503, f"Request failed ({type(e).__name__})") from e

            except ValueError as e:
                self._fail("invalid_response", start_time, error=type(e).__name__, **params)
                raise PeerApiError(self.peer, 502, f"Invalid response body ({type(e).__name__})") from e

        duration_seconds = time.perf_counter() - start_time
        logger.info(
            "peer_request_completed",
            peer=self.peer,
            duration_ms=round(duration_seconds * 1000, 2),
            outcome="success",
            **params,
        )
        metrics.record_peer_fetch(self.peer, success=True, latency_seconds=duration_seconds)
        return data

    def _fail(self, error_type: str, start_time: float, **fields: Any) -> None:
        duration_seconds = time.perf_counter() - start_time
        log = logger.warning if error_type == "not_found" else logger.error
        log(
            "peer_request_failed",
            peer=self.peer,
            error_type=error_type,
            duration_ms=round(duration_seconds * 1000, 2),
            outcome="not_found" if error_type == "not_found" else "error",
            **fields,
        )
        metrics.record_peer_fetch(
            self.peer, success=False, latency_seconds=duration_seconds, error_type=error_type
        )


class ClientesClient(PeerClient):
    """Client for the client directory service."""

    peer = "clientes"

    def __init__(self, base_url: Optional[str] = None, **kwargs: Any):
        super().__init__(base_url or settings.clientes_api_base, **kwargs)

    async def get_cliente(self, cpf: str) -> dict:
        """
        Fetch a client record by CPF.

        Raises:
            PeerApiError: 404 if the client does not exist, otherwise a transport failure
        """
        return await self._get("/clientes", {"cpf": cpf})


class CartoesClient(PeerClient):
    """Client for the card directory service."""

    peer = "cartoes"

    def __init__(self, base_url: Optional[str] = None, **kwargs: Any):
        super().__init__(base_url or settings.cartoes_api_base, **kwargs)

    async def get_cartoes_by_cliente(self, cpf: str) -> list:
        """
        Fetch the cards owned by a CPF.

        Raises:
            PeerApiError: If the call fails
        """
        return await self._get("/cartoes", {"cpf": cpf})


def _message_from(response: httpx.Response) -> str:
    """Best-effort human readable message from an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("detail") or body)
    return str(body)


def _trace_headers() -> dict[str, str]:
    """Forward the current request id so logs can be joined across services."""
    request_id = request_id_ctx.get()
    return {"X-Request-ID": request_id} if request_id else {}
