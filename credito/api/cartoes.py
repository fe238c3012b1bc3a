"""API route handlers for the card directory."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from credito.database import get_db
from credito.logging import get_logger
from credito.schemas import (
    CartaoClienteResponse,
    CartaoResponse,
    CartaoSaveRequest,
    MessageResponse,
)
from credito.services.cartoes import CartaoService

logger = get_logger(__name__)

router = APIRouter(prefix="/cartoes", tags=["cartoes"])


@router.get("")
async def get_cartoes(
    renda: Optional[int] = Query(None, ge=0, description="Maximum income requirement"),
    cpf: Optional[str] = Query(None, description="Owning client CPF"),
    db: Session = Depends(get_db),
):
    """
    Query cards.

    - `?cpf=`: ownership projections for that client
    - `?renda=`: cards whose income requirement is at most `renda`
    - no query: status probe, answers "ok"
    """
    service = CartaoService(db)

    if cpf is not None:
        cartoes = service.list_by_cpf(cpf)
        logger.info("cartoes_by_cpf_listed", cpf=cpf, count=len(cartoes))
        return [
            CartaoClienteResponse(
                cpf=c.cpf,
                nome=c.nome,
                bandeira=c.bandeira,
                renda=c.renda,
                limite_liberado=c.limite_basico,
            )
            for c in cartoes
        ]

    if renda is not None:
        cartoes = service.list_by_max_income(renda)
        logger.info("cartoes_by_renda_listed", renda=renda, count=len(cartoes))
        return [CartaoResponse.model_validate(c) for c in cartoes]

    return "ok"


@router.post("", status_code=201, response_model=MessageResponse)
async def save_cartao(request_body: CartaoSaveRequest, db: Session = Depends(get_db)):
    """Register a new card."""
    CartaoService(db).create(request_body)
    return JSONResponse(status_code=201, content={"message": "Cartão cadastrado com sucesso!"})
