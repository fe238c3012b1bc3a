"""API route handlers for the client directory."""
from typing import Optional, Union

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from credito.database import get_db
from credito.exceptions import ClienteNotFoundError
from credito.logging import get_logger, mask_cpf, set_request_context
from credito.schemas import ClienteResponse, ClienteSaveRequest, MessageResponse
from credito.services.clientes import ClienteService

logger = get_logger(__name__)

router = APIRouter(prefix="/clientes", tags=["clientes"])


@router.get("", response_model=Union[ClienteResponse, list[ClienteResponse]])
async def get_clientes(
    request: Request,
    cpf: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    List all clients, or fetch one client by CPF.

    Without a query the full list is returned (empty list when there are
    no clients). With `?cpf=` the matching client is returned, or 404.
    """
    service = ClienteService(db)

    if cpf is None:
        clientes = service.list_all()
        logger.info("clientes_listed", count=len(clientes))
        return [ClienteResponse.model_validate(c) for c in clientes]

    set_request_context(getattr(request.state, "request_id", ""), cpf=cpf)
    cliente = service.get_by_cpf(cpf)
    if cliente is None:
        logger.info("cliente_not_found", cpf=cpf, outcome="not_found")
        raise ClienteNotFoundError(f"cpf={mask_cpf(cpf)}")

    return ClienteResponse.model_validate(cliente)


@router.post("", status_code=201, response_model=MessageResponse)
async def save_cliente(
    request_body: ClienteSaveRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Register a new client. The Location header points at the CPF lookup."""
    set_request_context(getattr(request.state, "request_id", ""), cpf=request_body.cpf)

    cliente = ClienteService(db).create(request_body)
    location = request.url.include_query_params(cpf=cliente.cpf)

    return JSONResponse(
        status_code=201,
        content={"message": "Cliente cadastrado com sucesso!"},
        headers={"Location": str(location)},
    )


@router.get("/{cliente_id}", response_model=ClienteResponse)
async def get_cliente_by_id(cliente_id: int, db: Session = Depends(get_db)):
    """Fetch a client by its id."""
    cliente = ClienteService(db).get_by_id(cliente_id)
    if cliente is None:
        raise ClienteNotFoundError(f"id={cliente_id}")
    return ClienteResponse.model_validate(cliente)


@router.put("/{cliente_id}", response_model=MessageResponse)
async def update_cliente(
    cliente_id: int,
    request_body: ClienteSaveRequest,
    db: Session = Depends(get_db),
):
    """Overwrite a client's CPF, name and age."""
    ClienteService(db).update(cliente_id, request_body)
    return MessageResponse(message="Cliente atualizado com sucesso!")


@router.delete("/{cliente_id}", status_code=204)
async def delete_cliente(cliente_id: int, db: Session = Depends(get_db)):
    """Remove a client."""
    ClienteService(db).delete(cliente_id)
    return Response(status_code=204)
