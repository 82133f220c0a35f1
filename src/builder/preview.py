"""
Pipeline preview summary: stages left to right plus headline statistics.
"""

from dataclasses import dataclass, field

from ..core.entities import PipelineConfiguration, Stage


@dataclass
class PipelineSummary:
    """What a preview shows for one configuration."""
    name: str = ""
    description: str = ""
    stages: list = field(default_factory=list)  # sorted by order
    badges: list = field(default_factory=list)

    total_stages: int = 0
    active_stage_count: int = 0  # inactive stages excluded
    average_probability: int = 0


def scope_badges(config: PipelineConfiguration) -> list[str]:
    badges = []
    if config.branch_specific:
        badges.append(f"Branch: {config.branch_name or ''}")
    if config.role_specific:
        badges.append(f"Role: {config.role_name or ''}")
    if config.is_default:
        badges.append("Default")
    return badges


def average_probability(stages: list[Stage]) -> int:
    if not stages:
        return 0
    # Half-up, matching the preview screen's rounding
    return int(sum(s.probability for s in stages) / len(stages) + 0.5)


def summarize(config: PipelineConfiguration) -> PipelineSummary:
    stages = config.sorted_stages()
    return PipelineSummary(
        name=config.name,
        description=config.description or "",
        stages=stages,
        badges=scope_badges(config),
        total_stages=len(stages),
        active_stage_count=len([s for s in stages if s.is_active]),
        average_probability=average_probability(stages)
    )


def render_text(config: PipelineConfiguration) -> str:
    """Plain-text left-to-right rendering, inactive stages in brackets."""
    summary = summarize(config)
    cells = []
    for stage in summary.stages:
        cell = f"{stage.name} ({stage.probability}%)"
        cells.append(cell if stage.is_active else f"[{cell}]")

    header = summary.name or "(unnamed pipeline)"
    if summary.badges:
        header += "  " + " | ".join(summary.badges)

    lines = [header, " -> ".join(cells) if cells else "(no stages)"]
    lines.append(
        f"{summary.total_stages} stages, {summary.active_stage_count} active, "
        f"avg probability {summary.average_probability}%"
    )
    return "\n".join(lines)
