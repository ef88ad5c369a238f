"""
Canonical Prompt Construction
=============================

Pure functions that render a Snapshot or AggregateSummary into a PromptPayload.

INVARIANT: same (input, PromptConfig) -> byte-identical PromptPayload
No clock, no randomness, no process-wide state.

The section outline per mode is fixed data, so downstream output stays
comparable across requests.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import json
from typing import Any, Dict, Optional, Tuple, Union

from ..contracts.base import InvalidInput
from ..contracts.reference import ReferenceMatrix
from ..contracts.snapshot import AggregateSummary, PromptPayload, Snapshot
from .categories import CANONICAL_CATEGORIES, canonical_index


DEFAULT_BRAND = "The Elysium Group"
NO_NUMERIC_SCORES_INSTRUCTION = "No numeric scores in the prose."
OUTPUT_FORMATS = ("text", "json")

MODE_SINGLE = "single"
MODE_AGGREGATE = "aggregate"


@dataclass(frozen=True)
class Section:
    key: str
    title: str
    guidance: str


SECTION_OUTLINES: Dict[str, Tuple[Section, ...]] = {
    MODE_SINGLE: (
        Section("executive_summary", "Executive summary",
                "Three to five sentences on the culture as this respondent experiences it."),
        Section("strengths", "Strengths to protect",
                "The dominant styles and the business value they create."),
        Section("priority_shifts", "Priority shifts (next 90 days)",
                "Where observed and personal priorities diverge, and what to move first."),
        Section("leadership_behaviors", "Leadership behaviors",
                "Concrete, observable behaviors leaders can start this quarter."),
        Section("risks_and_metrics", "Risks and metrics",
                "Failure modes to watch and leading indicators to track."),
    ),
    MODE_AGGREGATE: (
        Section("executive_summary", "Executive summary",
                "Three to five sentences on the collective culture."),
        Section("strengths", "Collective strengths",
                "The styles the group leans on most and the outcomes they support."),
        Section("perception_gaps", "Perception gaps",
                "Differences between what respondents observe and what they personally value."),
        Section("priority_shifts", "Priority shifts (next 90 days)",
                "The few shifts with the largest expected business impact."),
        Section("leadership_behaviors", "Leadership behaviors",
                "Concrete, observable behaviors leaders can start this quarter."),
        Section("risks_and_metrics", "Risks and metrics",
                "Failure modes to watch and leading indicators to track."),
    ),
}


@dataclass(frozen=True)
class PromptConfig:
    """
    Presentation options for build().

    brand_name is opaque text: it is substituted verbatim and never sanitized.
    """
    brand_name: str = DEFAULT_BRAND
    suppress_numeric_scores: bool = True
    reference_notes: Tuple[str, ...] = field(default_factory=tuple)
    reference_matrix: Optional[ReferenceMatrix] = None
    output_format: str = "text"

    def __post_init__(self):
        if not isinstance(self.reference_notes, tuple):
            object.__setattr__(self, "reference_notes", tuple(self.reference_notes))
        if self.output_format not in OUTPUT_FORMATS:
            raise InvalidInput(f"Unknown output format: {self.output_format}")


PromptInput = Union[Snapshot, AggregateSummary]


def build(data: PromptInput, config: Optional[PromptConfig] = None) -> PromptPayload:
    """
    Render input data into a PromptPayload.

    Raises InvalidInput for a Snapshot with no scores, or an input that is
    neither a Snapshot nor an AggregateSummary.
    """
    config = config or PromptConfig()

    if isinstance(data, Snapshot):
        if not data.scores:
            raise InvalidInput("Snapshot has no usable scores")
        mode = MODE_SINGLE
        header = "Snapshot (single respondent):"
        body = _snapshot_data(data)
    elif isinstance(data, AggregateSummary):
        mode = MODE_AGGREGATE
        header = f"Snapshot (aggregated, {data.sample_size} respondents):"
        body = _summary_data(data)
    else:
        raise InvalidInput(f"Cannot build a prompt from {type(data).__name__}")

    return PromptPayload(
        system=render_system(mode, config),
        user=render_user(header, body, config),
        mode=mode,
        output_format=config.output_format,
    )


def section_keys(mode: str) -> Tuple[str, ...]:
    """Ordered section identifiers for a mode."""
    return tuple(section.key for section in SECTION_OUTLINES[mode])


# =============================================================================
# SYSTEM TEXT
# =============================================================================

def render_system(mode: str, config: PromptConfig) -> str:
    styles = ", ".join(c.label for c in CANONICAL_CATEGORIES)
    audience = (
        "a single respondent's view, written for their leadership team"
        if mode == MODE_SINGLE
        else "the combined view of many respondents, written for the executive team"
    )

    lines = [
        f'You are an organizational culture advisor for "{config.brand_name}".',
        f"You are interpreting {audience}.",
        f"Use HBR's 8 styles: {styles}.",
        "Do not introduce categories outside these eight styles.",
        "Tone: premium, plain-spoken, executive-ready.",
    ]
    if config.suppress_numeric_scores:
        lines.append(NO_NUMERIC_SCORES_INSTRUCTION)
    lines.append("Focus on 90-day leader behaviors linked to business outcomes.")

    if config.reference_matrix is not None:
        lines.append(
            "Ground every interpretation in the reference matrix supplied with the data; "
            "use its strengths, risks and behaviors rather than inventing new ones."
        )

    lines.append("")
    lines.append("Structure the response with these sections, in order:")
    for i, section in enumerate(SECTION_OUTLINES[mode], start=1):
        lines.append(f"{i}. {section.title}: {section.guidance}")

    lines.append("")
    if config.output_format == "json":
        keys = ", ".join(f'"{key}"' for key in section_keys(mode))
        lines.append(
            f"Reply with a single JSON object with exactly these keys: {keys}. "
            "Each value is a string of Markdown text."
        )
    else:
        lines.append("Reply in Markdown with one heading per section.")

    return "\n".join(lines)


# =============================================================================
# USER CONTENT
# =============================================================================

def render_user(header: str, body: Dict[str, Any], config: PromptConfig) -> str:
    parts = [header, _dump(body), "", "Reference notes:"]
    parts.extend(config.reference_notes)

    if config.reference_matrix is not None:
        parts.append("")
        parts.append("Reference matrix:")
        parts.append(_dump(config.reference_matrix.as_dict()))

    return "\n".join(parts)


def _snapshot_data(snapshot: Snapshot) -> Dict[str, Any]:
    ordered = sorted(
        enumerate(snapshot.scores),
        key=lambda item: (canonical_index(item[1].key), item[0]),
    )
    return {
        "scores": [
            {"key": entry.key, "label": entry.label, "value": _number(entry.value)}
            for _, entry in ordered
        ],
        "top3": {
            "observed": list(snapshot.top_observed),
            "personal": list(snapshot.top_personal),
        },
    }


def _summary_data(summary: AggregateSummary) -> Dict[str, Any]:
    return {
        "sampleSize": summary.sample_size,
        "categoryAverages": [
            {"key": entry.key, "label": entry.label, "average": _number(entry.average)}
            for entry in summary.category_averages
        ],
        "topObservedByFrequency": list(summary.top_observed_by_frequency),
        "topPersonalByFrequency": list(summary.top_personal_by_frequency),
    }


def _number(value: float) -> Union[int, float]:
    if float(value).is_integer():
        return int(value)
    return round(value, 2)


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
