"""
Prompt construction for the generation backend.

build_prompt() is a pure function: the same inputs always give the same
prompt, byte for byte.
"""

from typing import List, Optional

from .models import OutputFormat, Template

DEFAULT_INSTRUCTIONS = (
    "Clean up technical jargon, group by Features/Fixes/Improvements, "
    "remove duplicates."
)


def build_prompt(
    raw_material: str,
    output_format: OutputFormat,
    template: Template,
    instructions: Optional[str] = None,
) -> str:
    """
    Build the instruction prompt for one changelog.

    Args:
        raw_material: Notes or rendered commit lines, included verbatim
        output_format: Format the changelog must be written in
        template: Stylistic preset
        instructions: Caller directive; replaces DEFAULT_INSTRUCTIONS when given

    Returns:
        The prompt text
    """
    directive = instructions if instructions and instructions.strip() else DEFAULT_INSTRUCTIONS

    lines: List[str] = [
        "You are an expert Changelog Generator.",
        "Action: Convert the following raw technical notes/commits into a "
        "polished, professional changelog.",
        "",
        "Settings:",
        f"- Format: {OutputFormat(output_format).value}",
        f"- Template Style: {Template(template).value}",
        f"- Instructions: {directive}",
        "",
        "Raw Input:",
        raw_material,
        "",
        "Return ONLY the generated content. No preamble.",
    ]
    return "\n".join(lines)
