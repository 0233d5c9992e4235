"""
Closed enumerations shared by the database models and API schemas.
Values are the Portuguese identifiers stored in the database.
"""
import enum


class LeadStatus(str, enum.Enum):
    """Lead pipeline stages, in kanban column order."""
    NOVO = "novo"
    EM_ATENDIMENTO = "em_atendimento"
    QUALIFICADO = "qualificado"
    PROPOSTA = "proposta"
    FECHADO = "fechado"
    PERDIDO = "perdido"


class PropertyPurpose(str, enum.Enum):
    VENDA = "venda"
    LOCACAO = "locacao"
    AMBOS = "ambos"


class PropertyStatus(str, enum.Enum):
    DISPONIVEL = "disponivel"
    VENDIDO = "vendido"
    LOCADO = "locado"
    RESERVADO = "reservado"
    INATIVO = "inativo"


class RentalStatus(str, enum.Enum):
    ATIVO = "ativo"
    ENCERRADO = "encerrado"
    RESCINDIDO = "rescindido"
    RENOVADO = "renovado"


class GuaranteeType(str, enum.Enum):
    CAUCAO = "caucao"
    FIADOR = "fiador"
    SEGURO_FIANCA = "seguro_fianca"
    TITULO_CAPITALIZACAO = "titulo_capitalizacao"


class InstallmentStatus(str, enum.Enum):
    PENDENTE = "pendente"
    PAGO = "pago"
    ATRASADO = "atrasado"
    CANCELADO = "cancelado"
