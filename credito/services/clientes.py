"""Client directory service."""
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from credito.exceptions import ClienteNotFoundError, DuplicateCpfError
from credito.logging import get_logger, log_audit
from credito.models import Cliente
from credito.schemas import ClienteSaveRequest
from credito import metrics

logger = get_logger(__name__)


class ClienteService:
    """
    Service for the client registry.

    CPF is the natural key: creating or updating a client onto a CPF that
    already belongs to another client is rejected with DuplicateCpfError.
    Every write emits one audit log entry with the CPF masked.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: ClienteSaveRequest) -> Cliente:
        """
        Register a new client.

        Raises:
            DuplicateCpfError: If the CPF is already registered
        """
        if self.get_by_cpf(data.cpf) is not None:
            raise DuplicateCpfError(data.cpf)

        cliente = Cliente(cpf=data.cpf, nome=data.nome, idade=data.idade)
        self.db.add(cliente)
        self._commit(data.cpf)
        self.db.refresh(cliente)

        log_audit(logger, "cliente_saved", cliente.id, cliente.cpf)
        metrics.record_directory_write("cliente", "create")
        return cliente

    def get_by_cpf(self, cpf: str) -> Optional[Cliente]:
        return self.db.query(Cliente).filter(Cliente.cpf == cpf).first()

    def get_by_id(self, cliente_id: int) -> Optional[Cliente]:
        return self.db.get(Cliente, cliente_id)

    def list_all(self) -> list[Cliente]:
        return self.db.query(Cliente).order_by(Cliente.id).all()

    def update(self, cliente_id: int, data: ClienteSaveRequest) -> Cliente:
        """
        Overwrite a client's CPF, name and age.

        Raises:
            ClienteNotFoundError: If no client has this id
            DuplicateCpfError: If the new CPF belongs to another client
        """
        cliente = self.get_by_id(cliente_id)
        if cliente is None:
            raise ClienteNotFoundError(f"id={cliente_id}")

        if data.cpf != cliente.cpf:
            owner = self.get_by_cpf(data.cpf)
            if owner is not None and owner.id != cliente.id:
                raise DuplicateCpfError(data.cpf)

        cliente.cpf = data.cpf
        cliente.nome = data.nome
        cliente.idade = data.idade
        self._commit(data.cpf)
        self.db.refresh(cliente)

        log_audit(logger, "cliente_updated", cliente.id, cliente.cpf)
        metrics.record_directory_write("cliente", "update")
        return cliente

    def delete(self, cliente_id: int) -> None:
        """
        Remove a client.

        Raises:
            ClienteNotFoundError: If no client has this id
        """
        cliente = self.get_by_id(cliente_id)
        if cliente is None:
            raise ClienteNotFoundError(f"id={cliente_id}")

        self.db.delete(cliente)
        self.db.commit()

        logger.info("cliente_deleted", cliente_id=cliente_id)
        metrics.record_directory_write("cliente", "delete")

    def _commit(self, cpf: str) -> None:
        # The unique index still guards against a concurrent insert of the same CPF
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateCpfError(cpf) from e
