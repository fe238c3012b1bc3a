"""API route handlers for the credit evaluator."""
from fastapi import APIRouter, Depends, Request

from credito.logging import set_request_context
from credito.schemas import SituacaoClienteResponse
from credito.services.avaliador import AvaliadorCreditoService

router = APIRouter(prefix="/avaliacoes-credito", tags=["avaliador"])


def get_avaliador_service() -> AvaliadorCreditoService:
    """Dependency that provides the evaluator wired to the configured peers."""
    return AvaliadorCreditoService()


@router.get("")
async def status():
    return "ok"


@router.get("/situacao-cliente", response_model=SituacaoClienteResponse)
async def get_situacao_cliente(
    cpf: str,
    request: Request,
    service: AvaliadorCreditoService = Depends(get_avaliador_service),
):
    """
    Get a client's credit situation.

    Looks the client up in the client directory and their cards in the card
    directory. Answers 404 if the client does not exist and 502 if either
    directory could not be reached.
    """
    set_request_context(getattr(request.state, "request_id", ""), cpf=cpf)
    return await service.get_credit_situation(cpf)
