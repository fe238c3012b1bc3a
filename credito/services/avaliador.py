"""Credit evaluator: assembles a client's credit situation from the peer directories."""
import asyncio
import time
from typing import Optional

from pydantic import ValidationError

from credito.exceptions import ClienteNotFoundError, PeerApiError, PeerCommunicationError
from credito.logging import get_logger
from credito.schemas import SituacaoClienteResponse
from credito.services.peers import CartoesClient, ClientesClient
from credito import metrics

logger = get_logger(__name__)


class AvaliadorCreditoService:
    """
    Service that composes client and card data into a credit situation.

    The aggregation is all-or-nothing:
    1. Both peer lookups are dispatched concurrently
    2. The client result is inspected first, then the cards result
    3. A peer 404 becomes ClienteNotFoundError
    4. Any other peer failure becomes PeerCommunicationError
    5. Only when both succeed is a SituacaoClienteResponse returned

    There are no retries and no partial results.
    """

    def __init__(
        self,
        clientes_client: Optional[ClientesClient] = None,
        cartoes_client: Optional[CartoesClient] = None,
    ):
        self.clientes_client = clientes_client or ClientesClient()
        self.cartoes_client = cartoes_client or CartoesClient()

    async def get_credit_situation(self, cpf: str) -> SituacaoClienteResponse:
        """
        Get the credit situation for a CPF.

        Raises:
            ClienteNotFoundError: If a peer reported the client as absent
            PeerCommunicationError: If a peer could not be reached or failed
        """
        start_time = time.perf_counter()
        logger.info("credit_situation_requested", cpf=cpf)

        cliente, cartoes = await asyncio.gather(
            self.clientes_client.get_cliente(cpf),
            self.cartoes_client.get_cartoes_by_cliente(cpf),
            return_exceptions=True,
        )

        try:
            # Client half first: it decides the outcome whatever happened to the cards
            for result in (cliente, cartoes):
                if isinstance(result, PeerApiError):
                    raise self._translate(result) from result
                if isinstance(result, BaseException):
                    raise result

            try:
                situacao = SituacaoClienteResponse(cliente=cliente, cartoes=cartoes)
            except ValidationError as e:
                raise PeerCommunicationError(
                    f"Resposta inválida dos serviços de clientes/cartões: {e.error_count()} erro(s)",
                    502,
                ) from e

        except ClienteNotFoundError:
            self._record("client_not_found", start_time, cpf)
            raise
        except PeerCommunicationError:
            self._record("peer_error", start_time, cpf)
            raise

        self._record("success", start_time, cpf, cartao_count=len(situacao.cartoes))
        return situacao

    @staticmethod
    def _translate(error: PeerApiError) -> Exception:
        if error.status_code == 404:
            return ClienteNotFoundError(error.detail)
        return PeerCommunicationError(
            f"Erro de comunicação com {error.peer}: {error.detail}",
            error.status_code,
        )

    @staticmethod
    def _record(outcome: str, start_time: float, cpf: str, **fields) -> None:
        duration_seconds = time.perf_counter() - start_time
        log = logger.info if outcome == "success" else logger.warning
        log(
            "credit_situation_completed",
            cpf=cpf,
            outcome=outcome,
            duration_ms=round(duration_seconds * 1000, 2),
            **fields,
        )
        metrics.record_evaluation(outcome, duration_seconds)
