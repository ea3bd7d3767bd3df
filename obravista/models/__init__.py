"""SQLAlchemy model package for the ObraVista schema."""

from obravista.models.activity import ActivityLog
from obravista.models.attendance import AttendanceRecord, Deduction
from obravista.models.base import Base
from obravista.models.budget import Budget, BudgetItem
from obravista.models.crm import Deal, Interaction, Lead, Proposal, Survey
from obravista.models.people import Contractor, Crew, CrewMember, Specialty
from obravista.models.site import Site
from obravista.models.task import Attachment, ChecklistItem, Label, PurchaseRequest, Task, task_labels
from obravista.models.tool import Tool, ToolMovement
from obravista.models.user import User

__all__ = [
    "ActivityLog",
    "Attachment",
    "AttendanceRecord",
    "Base",
    "Budget",
    "BudgetItem",
    "ChecklistItem",
    "Contractor",
    "Crew",
    "CrewMember",
    "Deal",
    "Deduction",
    "Interaction",
    "Label",
    "Lead",
    "Proposal",
    "PurchaseRequest",
    "Site",
    "Specialty",
    "Survey",
    "Task",
    "Tool",
    "ToolMovement",
    "User",
    "task_labels",
]
