"""Configurable pipeline-stage label sets and their display categories."""

from __future__ import annotations

from dataclasses import dataclass


CATEGORY_COLORS = {
    "consideration": "#8b5cf6",
    "review": "#6366f1",
    "in_progress": "#3b82f6",
    "deferred": "#64748b",
    "declined": "#ef4444",
    "successful": "#10b981",
}
NEUTRAL_COLOR = "#94a3b8"


@dataclass(frozen=True)
class StatusStage:
    label: str
    category: str
    secured: bool = False


@dataclass(frozen=True)
class StatusSet:
    """Ordered, closed set of status labels for one deployment."""

    name: str
    stages: tuple[StatusStage, ...]

    @property
    def labels(self) -> list[str]:
        return [stage.label for stage in self.stages]

    @property
    def default_label(self) -> str:
        return self.stages[0].label

    def stage(self, label: str) -> StatusStage | None:
        for stage in self.stages:
            if stage.label == label:
                return stage
        return None

    def category_for(self, label: str) -> str | None:
        stage = self.stage(label)
        return stage.category if stage else None

    def color_for(self, label: str) -> str:
        category = self.category_for(label)
        if category is None:
            return NEUTRAL_COLOR
        return CATEGORY_COLORS.get(category, NEUTRAL_COLOR)

    def is_secured(self, label: str) -> bool:
        stage = self.stage(label)
        return bool(stage and stage.secured)

    def rank(self, label: str) -> int:
        for index, stage in enumerate(self.stages):
            if stage.label == label:
                return index
        return len(self.stages)


SIMPLE_STATUSES = StatusSet(
    name="simple",
    stages=(
        StatusStage("Pending", "consideration"),
        StatusStage("Submitted", "in_progress"),
        StatusStage("Approved", "successful", secured=True),
        StatusStage("Rejected", "declined"),
    ),
)

EXTENDED_STATUSES = StatusSet(
    name="extended",
    stages=(
        StatusStage("For consideration", "consideration"),
        StatusStage("For Managers' meeting", "review"),
        StatusStage("In progress/go ahead - Application in progress", "in_progress"),
        StatusStage("In progress/go ahead - awaiting application outcome", "in_progress"),
        StatusStage("In progress/go ahead - Suitable to apply", "in_progress"),
        StatusStage("Return to this another time", "deferred"),
        StatusStage("Not proceeding", "declined"),
        StatusStage("Applied - unsuccessful", "declined"),
        StatusStage("Applied - Successful", "successful", secured=True),
    ),
)

STATUS_SETS = {status_set.name: status_set for status_set in (SIMPLE_STATUSES, EXTENDED_STATUSES)}


def status_set_by_name(name: str | None) -> StatusSet:
    if not name:
        return EXTENDED_STATUSES
    try:
        return STATUS_SETS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown status set {name!r}. Choose one of: {', '.join(sorted(STATUS_SETS))}."
        ) from None
