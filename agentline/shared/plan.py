"""Plan extraction — split a checklist block out of assistant prose."""

from __future__ import annotations

from dataclasses import dataclass, field

from agentline.shared.models.activity import PlanStep, PlanStepStatus
from agentline.shared.normalize import coerce_text
from agentline.shared.patterns import match_plan_line


@dataclass
class PlanExtraction:
    steps: list[PlanStep] = field(default_factory=list)
    remaining_text: str = ""


def extract_plan(text: str | None) -> PlanExtraction:
    """Pull plan-shaped lines out of *text*.

    A numbered or checkbox line opens a plan block. While the block is open,
    bullets count as steps and blank lines are swallowed; the first other
    non-blank line closes it. Plan lines are removed from the remaining text,
    and steps whose text is empty are dropped.
    """
    text = coerce_text(text)
    if not text:
        return PlanExtraction()

    steps: list[PlanStep] = []
    kept: list[str] = []
    in_plan = False

    for line in text.splitlines():
        if in_plan and not line.strip():
            continue
        plan_line = match_plan_line(line, in_plan)
        if plan_line is not None:
            in_plan = True
            if plan_line.text:
                steps.append(PlanStep(
                    text=plan_line.text,
                    status=(
                        PlanStepStatus.COMPLETED
                        if plan_line.completed
                        else PlanStepStatus.PENDING
                    ),
                ))
            continue
        in_plan = False
        kept.append(line)

    return PlanExtraction(steps=steps, remaining_text="\n".join(kept).strip())
