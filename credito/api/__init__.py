"""HTTP routers, one per service."""
from credito.api.avaliador import router as avaliador_router
from credito.api.cartoes import router as cartoes_router
from credito.api.clientes import router as clientes_router

__all__ = ["avaliador_router", "cartoes_router", "clientes_router"]
