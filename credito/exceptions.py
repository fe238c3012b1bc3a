"""Domain and transport errors raised by the credit services."""


class CreditoError(Exception):
    """Base class for all errors raised by the credit services."""


class ClienteNotFoundError(CreditoError):
    """Raised when a client does not exist (by id or by CPF)."""

    message = "Cliente não encontrado!"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail or self.message)


class DuplicateCpfError(CreditoError):
    """Raised when a CPF is already registered to another client."""

    message = "CPF já cadastrado!"

    def __init__(self, cpf: str):
        self.cpf = cpf
        super().__init__(self.message)


class PeerApiError(CreditoError):
    """Raised when a call to a peer service fails at the transport/protocol layer."""

    def __init__(self, peer: str, status_code: int, detail: str):
        self.peer = peer
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{peer} API error {status_code}: {detail}")


class PeerCommunicationError(CreditoError):
    """
    Raised by the evaluator when a peer is unreachable or broken.

    Carries the peer's status code so callers can tell "the peer is broken"
    apart from "the client does not exist".
    """

    def __init__(self, message: str, status_code: int):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
