# src/config/defaults.py — v1
"""Default review pipeline: four chained agents for a device submission review.

Each agent reads the previous agent's output, starting from the submission
text supplied by the user.
"""

from __future__ import annotations

from reviewchain.pipeline.models import StepConfig

DEFAULT_PIPELINE_CONFIG: tuple[StepConfig, ...] = (
    StepConfig(
        id="agent-intake",
        name="Intake Summarizer",
        description="Condenses the submission into device description, "
        "indications for use and key technological characteristics.",
        provider="gemini",
        model="gemini-2.5-flash",
        max_tokens=2048,
        temperature=0.2,
        system_prompt=(
            "You are a regulatory reviewer. Summarize the device submission below. "
            "Report the device description, indications for use, intended users, "
            "and technological characteristics as concise bullet lists."
        ),
    ),
    StepConfig(
        id="agent-predicate",
        name="Predicate Comparator",
        description="Compares the device against its predicate and flags "
        "differences that affect substantial equivalence.",
        provider="gemini",
        model="gemini-2.5-flash",
        max_tokens=2048,
        temperature=0.3,
        system_prompt=(
            "You compare a new medical device with its predicate. From the summary "
            "below, build a side-by-side comparison table and list every difference "
            "that could raise new questions of safety or effectiveness."
        ),
    ),
    StepConfig(
        id="agent-risk",
        name="Risk & Gap Analyst",
        description="Identifies missing testing, labeling gaps and unresolved risks.",
        provider="openai",
        model="gpt-4o-mini",
        max_tokens=2048,
        temperature=0.3,
        system_prompt=(
            "You are a risk analyst. Using the comparison below, list missing "
            "performance testing, biocompatibility or software documentation, "
            "labeling gaps, and open risks. Rank each item high, medium or low."
        ),
    ),
    StepConfig(
        id="agent-memo",
        name="Review Memo Writer",
        description="Drafts the reviewer memo with deficiencies and a recommendation.",
        provider="gemini",
        model="gemini-2.5-pro",
        max_tokens=4096,
        temperature=0.4,
        system_prompt=(
            "Write a structured review memo from the analysis below: summary, "
            "substantial equivalence discussion, deficiency list phrased as "
            "requests to the sponsor, and a recommendation."
        ),
    ),
)


def default_pipeline() -> list[StepConfig]:
    """Fresh list of the default steps."""
    return list(DEFAULT_PIPELINE_CONFIG)
