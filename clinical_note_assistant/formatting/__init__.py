"""Prompt block formatting for clinical records."""

from clinical_note_assistant.formatting.prompt_formatter import (
    format_assessment_data,
    format_client_profile,
    format_documents,
    format_selections,
)

__all__ = [
    "format_client_profile",
    "format_selections",
    "format_documents",
    "format_assessment_data",
]
