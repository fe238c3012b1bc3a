"""Service layer for the credit evaluation services."""
from credito.services.avaliador import AvaliadorCreditoService
from credito.services.cartoes import CartaoService
from credito.services.clientes import ClienteService
from credito.services.peers import CartoesClient, ClientesClient

__all__ = [
    "AvaliadorCreditoService",
    "CartaoService",
    "CartoesClient",
    "ClienteService",
    "ClientesClient",
]
