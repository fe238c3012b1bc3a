"""Card directory service."""
from sqlalchemy.orm import Session

from credito.logging import get_logger
from credito.models import Cartao
from credito.schemas import CartaoSaveRequest
from credito import metrics

logger = get_logger(__name__)


class CartaoService:
    """Service for the card registry. Cards reference their owner by CPF only."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: CartaoSaveRequest) -> Cartao:
        cartao = Cartao(
            cpf=data.cpf,
            nome=data.nome,
            bandeira=data.bandeira,
            renda=data.renda,
            limite_basico=data.limite_basico,
        )
        self.db.add(cartao)
        self.db.commit()
        self.db.refresh(cartao)

        logger.info("cartao_saved", cartao_id=cartao.id, cpf=cartao.cpf, renda=cartao.renda)
        metrics.record_directory_write("cartao", "create")
        return cartao

    def list_by_max_income(self, renda: int) -> list[Cartao]:
        """Cards whose income requirement is at most `renda`."""
        return (
            self.db.query(Cartao)
            .filter(Cartao.renda <= renda)
            .order_by(Cartao.id)
            .all()
        )

    def list_by_cpf(self, cpf: str) -> list[Cartao]:
        return (
            self.db.query(Cartao)
            .filter(Cartao.cpf == cpf)
            .order_by(Cartao.id)
            .all()
        )
