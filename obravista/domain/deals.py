"""Sales pipeline rules for CRM deals."""

from __future__ import annotations

from obravista.core.enums import TERMINAL_DEAL_STAGES, DealStage, InteractionKind
from obravista.core.exceptions import ValidationError
from obravista.domain.state_machine import StateMachine

PIPELINE_STAGES = [
    DealStage.PROSPECTING,
    DealStage.QUALIFYING,
    DealStage.PROPOSAL,
    DealStage.NEGOTIATING,
    DealStage.WON,
    DealStage.LOST,
]

# Any open stage may jump to any other stage, won/lost included; won/lost accept nothing.
DEAL_PIPELINE = StateMachine(
    {
        stage: (
            set()
            if stage in TERMINAL_DEAL_STAGES
            else {target for target in PIPELINE_STAGES if target != stage}
        )
        for stage in PIPELINE_STAGES
    }
)

USER_INTERACTION_KINDS = frozenset(kind for kind in InteractionKind if kind is not InteractionKind.SYSTEM)


def assert_stage_move(current: DealStage | str, target: DealStage | str) -> tuple[DealStage, DealStage]:
    """Validate a stage move and return both stages as enums."""
    source = DealStage(current)
    destination = DealStage(target)
    DEAL_PIPELINE.assert_transition(source, destination)
    return source, destination


def normalize_loss_reason(reason: str | None) -> str:
    """Return the trimmed loss reason, rejecting empty input."""
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError("A reason is required to mark a deal as lost.")
    return cleaned


def assert_user_interaction(kind: InteractionKind | str, text: str) -> InteractionKind:
    """Validate a user-entered timeline entry."""
    try:
        resolved = InteractionKind(kind)
    except ValueError as exc:
        raise ValidationError(f"Unknown interaction type: {kind}") from exc
    if resolved not in USER_INTERACTION_KINDS:
        raise ValidationError("System interactions are recorded by the server only.")
    if not text or not text.strip():
        raise ValidationError("Interaction text is required.")
    return resolved
