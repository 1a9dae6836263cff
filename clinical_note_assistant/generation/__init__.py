"""
Generation Layer - Prompt Construction and Service Contract

Submodules:
    prompt_builder.py → Preambles, static templates and prompt assembly
    generation_client.py → One request per call, validated results
"""

from clinical_note_assistant.generation.prompt_builder import (
    ASSESSMENT_SECTIONS,
    NOTE_TEMPLATES,
    PromptBuilder,
    get_assessment_sections,
    get_note_template,
)
from clinical_note_assistant.generation.generation_client import GenerationClient

__all__ = [
    "ASSESSMENT_SECTIONS",
    "NOTE_TEMPLATES",
    "PromptBuilder",
    "get_assessment_sections",
    "get_note_template",
    "GenerationClient",
]
