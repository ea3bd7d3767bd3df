"""Canonical enum values shared by the database, API and client layers.

Wire values keep the Portuguese vocabulary persisted by the backing store;
member names are English.
"""

from __future__ import annotations

import enum


class UserType(str, enum.Enum):
    ADMIN = "admin"
    USER = "usuario"


class DealStage(str, enum.Enum):
    """Stage of a deal in the sales pipeline."""

    PROSPECTING = "prospeccao"
    QUALIFYING = "qualificacao"
    PROPOSAL = "proposta"
    NEGOTIATING = "negociacao"
    WON = "ganho"
    LOST = "perdido"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_DEAL_STAGES


TERMINAL_DEAL_STAGES = frozenset({DealStage.WON, DealStage.LOST})


class LeadStatus(str, enum.Enum):
    NEW = "novo"
    CLIENT = "cliente"


class InteractionKind(str, enum.Enum):
    """Timeline entry types; SYSTEM entries come only from the backend."""

    NOTE = "nota"
    CALL = "ligacao"
    EMAIL = "email"
    MEETING = "reuniao"
    SYSTEM = "sistema"


class SiteStatus(str, enum.Enum):
    BUDGETING = "orcamento"
    APPROVED = "aprovado"
    PLANNING = "planejamento"
    IN_PROGRESS = "em_andamento"
    PAUSED = "pausado"
    FINISHED = "concluido"
    CANCELLED = "cancelado"


class TaskStatus(str, enum.Enum):
    """Kanban column of a task."""

    TODO = "a_fazer"
    IN_PROGRESS = "em_progresso"
    DONE = "concluido"


class TaskPriority(str, enum.Enum):
    LOW = "baixa"
    MEDIUM = "media"
    HIGH = "alta"
    URGENT = "urgente"


class AssignmentKind(str, enum.Enum):
    CREW = "equipe"
    CONTRACTOR = "prestador"


class AttachmentCategory(str, enum.Enum):
    DOCUMENT = "documento"
    PHOTO = "foto"
    VIDEO = "video"


class PurchaseStatus(str, enum.Enum):
    PENDING = "pendente"
    APPROVED = "aprovado"
    PURCHASED = "comprado"


class CrewRole(str, enum.Enum):
    LEADER = "lider"
    MEMBER = "membro"


class PersonType(str, enum.Enum):
    INDIVIDUAL = "PF"
    COMPANY = "PJ"


class PixKeyType(str, enum.Enum):
    CPF = "cpf"
    PHONE = "telefone"
    EMAIL = "email"
    RANDOM = "chave_aleatoria"
    CNPJ = "cnpj"


class ContractType(str, enum.Enum):
    DAILY_RATE = "diaria"
    FIXED_PRICE = "empreita"
    PAYROLL = "clt"


class ToolStatus(str, enum.Enum):
    AVAILABLE = "disponivel"
    IN_USE = "em_uso"
    MAINTENANCE = "manutencao"
    LOST = "perdida"


class MovementKind(str, enum.Enum):
    CHECKOUT = "saida"
    RETURN = "devolucao"
    TRANSFER = "transferencia"


class BudgetItemKind(str, enum.Enum):
    STAGE = "etapa"
    COST = "composicao"


class LogAction(str, enum.Enum):
    """Kind of change recorded in the activity log."""

    CREATED = "criou"
    UPDATED = "atualizou"
    DELETED = "deletou"
    MOVED = "moveu"


class LogEntity(str, enum.Enum):
    SITE = "obra"
    CREW = "equipe"
    TASK = "atribuicao"
