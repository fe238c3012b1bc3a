"""Pydantic schemas for request/response validation."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from credito.models import Bandeira


class MessageResponse(BaseModel):
    """Structured message body used by every non-resource response."""
    message: str


class PeerErrorResponse(MessageResponse):
    """Body returned when a peer service could not be reached."""
    status_code: int


class ClienteSaveRequest(BaseModel):
    """Request body for POST /clientes and PUT /clientes/{id}."""
    cpf: str = Field(..., min_length=1, max_length=11, description="Client CPF")
    nome: str = Field(..., min_length=1, description="Client name")
    idade: int = Field(..., ge=0, description="Client age in years")


class ClienteResponse(BaseModel):
    """A stored client record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    cpf: str
    nome: str
    idade: int


class CartaoSaveRequest(BaseModel):
    """Request body for POST /cartoes."""
    cpf: str = Field(..., min_length=1, max_length=11, description="Owning client CPF")
    renda: int = Field(..., ge=0, description="Minimum income required for the card")
    nome: Optional[str] = Field(None, description="Card product name")
    bandeira: Optional[Bandeira] = Field(None, description="Card brand")
    limite_basico: int = Field(0, ge=0, description="Basic limit granted with the card")


class CartaoResponse(BaseModel):
    """A stored card record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    cpf: str
    nome: Optional[str] = None
    bandeira: Optional[Bandeira] = None
    renda: int
    limite_basico: int


class CartaoClienteResponse(BaseModel):
    """Card ownership projection returned by GET /cartoes?cpf=."""
    cpf: str
    nome: Optional[str] = None
    bandeira: Optional[Bandeira] = None
    renda: int
    limite_liberado: int


class SituacaoClienteResponse(BaseModel):
    """A client's credit situation: the client snapshot plus their cards."""
    cliente: ClienteResponse
    cartoes: list[CartaoClienteResponse]
