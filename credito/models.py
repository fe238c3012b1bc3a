"""SQLAlchemy ORM models for the client and card directories."""
import enum
from datetime import datetime

from sqlalchemy import Column, String, Integer, BigInteger, DateTime, Enum, Text

from credito.database import Base


class Bandeira(str, enum.Enum):
    """Card brand."""
    MASTERCARD = "MASTERCARD"
    VISA = "VISA"
    ELO = "ELO"


class Cliente(Base):
    """A registered client, keyed by surrogate id with CPF as natural key."""
    __tablename__ = "cliente"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cpf = Column(String(11), nullable=False, unique=True, index=True)
    nome = Column(Text, nullable=False)
    idade = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)


class Cartao(Base):
    """A card offered to a client, with its minimum income requirement."""
    __tablename__ = "cartao"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cpf = Column(String(11), nullable=False, index=True)  # owning client, not enforced
    nome = Column(Text)
    bandeira = Column(Enum(Bandeira, name="bandeira"))
    renda = Column(BigInteger, nullable=False, index=True)
    limite_basico = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
