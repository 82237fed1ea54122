"""Corrective action plan (CAP) synthesis from ranked requirement results."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Mapping, Optional, Sequence, Union

from .errors import CAPInputError
from .models import (
    CorrectiveActionPlan,
    Document,
    DocumentType,
    Milestone,
    NonConformity,
    RootCauseAnalysis,
    SearchResult,
    SMARTAction,
    Timeline,
    TimelinePhase,
    VerificationMethod,
)

logger = logging.getLogger(__name__)

ACTION_WINDOW_DAYS = 30
PHASE_DAYS = 7
PHASE_GAP_DAYS = 1

NonConformityArg = Union[NonConformity, Mapping[str, Any]]
ResultArg = Union[SearchResult, Document]


def generate_cap(
    non_conformity: NonConformityArg,
    search_results: Sequence[ResultArg],
    synthesis_time: Optional[datetime] = None,
) -> CorrectiveActionPlan:
    """Generate a SMART corrective action plan.

    Args:
        non_conformity: The finding to correct; must carry a description
        search_results: Ranked results; only requirements produce actions
        synthesis_time: Reference time for deadlines and the timeline;
            defaults to now (UTC)

    Returns:
        CorrectiveActionPlan with actions, root cause, timeline and
        verification methods

    Raises:
        CAPInputError: If the non-conformity has no description
    """
    description = _description_of(non_conformity)
    now = synthesis_time or datetime.now(timezone.utc)

    requirements = [
        doc for doc in (_document_of(r) for r in search_results)
        if doc.type == DocumentType.REQUIREMENT
    ]

    actions = [
        _requirement_to_action(doc, description, now, number)
        for number, doc in enumerate(requirements, start=1)
    ]

    plan = CorrectiveActionPlan(
        actions=actions,
        root_cause=_root_cause_analysis(description, requirements),
        timeline=_create_timeline(actions, now),
        verification=_verification_methods(actions),
    )
    logger.debug(f"Synthesized CAP with {len(actions)} action(s)")
    return plan


def _description_of(non_conformity: NonConformityArg) -> str:
    if isinstance(non_conformity, NonConformity):
        description = non_conformity.description
    elif isinstance(non_conformity, Mapping):
        description = non_conformity.get("description")
    else:
        raise CAPInputError(
            f"Non-conformity must be a NonConformity or mapping, got {type(non_conformity).__name__}"
        )

    if not isinstance(description, str) or not description.strip():
        raise CAPInputError("Non-conformity description is required to build a CAP")
    return description


def _document_of(result: ResultArg) -> Document:
    if isinstance(result, Document):
        return result
    return result.document


def _requirement_to_action(
    requirement: Document, description: str, now: datetime, number: int
) -> SMARTAction:
    """Convert a requirement into a SMART action."""
    title = requirement.title
    return SMARTAction(
        id=f"action-{number:03d}-{requirement.id}",
        title=f"Address {title}",
        description=f"Implement corrective action for {title}",
        specific=f"Ensure compliance with {title}",
        measurable="Achieve 100% compliance verification",
        achievable="Within current resource constraints",
        relevant=f"Directly addresses the non-conformity: {description}",
        time_bound=f"Complete within {ACTION_WINDOW_DAYS} days",
        owner="TBD",
        deadline=now + timedelta(days=ACTION_WINDOW_DAYS),
        status="pending",
        requirement_id=requirement.id,
    )


def _root_cause_analysis(description: str, requirements: Sequence[Document]) -> RootCauseAnalysis:
    analysis = RootCauseAnalysis(immediate_cause=description)
    for requirement in requirements:
        if requirement.priority == "critical":
            analysis.root_causes.append(f"Lack of compliance with {requirement.title}")
            analysis.recommendations.append(f"Strengthen {requirement.title} implementation")
    return analysis


def _create_timeline(actions: Sequence[SMARTAction], start: datetime) -> Timeline:
    """Lay actions out as back-to-back phases separated by a one-day gap."""
    timeline = Timeline()
    current = start

    for action in actions:
        end = current + timedelta(days=PHASE_DAYS)
        timeline.phases.append(
            TimelinePhase(
                action_id=action.id,
                title=action.title,
                start_date=current,
                end_date=end,
                duration_days=PHASE_DAYS,
            )
        )
        timeline.milestones.append(
            Milestone(date=end, description=f"Complete {action.title}")
        )
        current = end + timedelta(days=PHASE_GAP_DAYS)

    timeline.total_duration_days = (PHASE_DAYS + PHASE_GAP_DAYS) * len(actions)
    return timeline


def _verification_methods(actions: Sequence[SMARTAction]) -> List[VerificationMethod]:
    methods: List[VerificationMethod] = []
    for action in actions:
        methods.append(
            VerificationMethod(
                action_id=action.id,
                method="Document Review",
                description=f"Review updated documentation for {action.title}",
                frequency="Upon completion",
                responsible="Quality Manager",
            )
        )
        methods.append(
            VerificationMethod(
                action_id=action.id,
                method="Site Inspection",
                description=f"Conduct on-site verification of {action.title} implementation",
                frequency="Within 7 days of completion",
                responsible="Auditor",
            )
        )
    return methods


def build_cap_summary(plan: CorrectiveActionPlan, title: str = "") -> str:
    """Render a plan as plain text.

    Args:
        plan: The corrective action plan
        title: Optional heading, e.g. the non-conformity reference

    Returns:
        Formatted summary string
    """
    lines = [
        f"Corrective Action Plan{': ' + title if title else ''}",
        f"Immediate cause: {plan.root_cause.immediate_cause}",
        f"Actions: {len(plan.actions)}, total duration: {plan.timeline.total_duration_days} days",
        "",
    ]

    if plan.root_cause.root_causes:
        lines.append("Root causes:")
        for cause in plan.root_cause.root_causes:
            lines.append(f"  - {cause}")
        lines.append("")

    lines.append("Actions:")
    if not plan.actions:
        lines.append("  (no requirement results to act on)")
    for action, phase in zip(plan.actions, plan.timeline.phases):
        lines.append(f"  [{action.id}] {action.title}")
        lines.append(f"       {action.specific}; owner: {action.owner}, status: {action.status}")
        lines.append(
            f"       Phase: {phase.start_date.date().isoformat()} to {phase.end_date.date().isoformat()}, "
            f"deadline: {action.deadline.date().isoformat()}"
        )

    if plan.root_cause.recommendations:
        lines.append("")
        lines.append("Recommendations:")
        for recommendation in plan.root_cause.recommendations:
            lines.append(f"  - {recommendation}")

    if plan.verification:
        lines.append("")
        lines.append("Verification:")
        for method in plan.verification:
            lines.append(
                f"  - {method.method} ({method.responsible}, {method.frequency.lower()}): {method.action_id}"
            )

    return "\n".join(lines)
