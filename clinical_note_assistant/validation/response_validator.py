"""
Response Validator - Structured Note Response Checks

This module validates the body returned for a note-generation request and
narrows it to the clients that were actually requested.

Validation is strict: the body must be a JSON array of objects with string
clientId, clientName and note. No type coercion is applied; extra keys on an
entry are ignored. Any mismatch rejects the whole response.

Pipeline Position:
    GenerationClient → LLM → [ResponseValidator] → caller
                              ^^^^^^^^^^^^^^^^^
                              You are here
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from clinical_note_assistant.core.exceptions import ResponseSchemaError
from clinical_note_assistant.core.models import GeneratedNote


# =============================================================================
# STAGE 1: WIRE MODEL
# =============================================================================


class NotePayload(BaseModel):
    """One entry of the note-generation response, exactly as sent on the wire."""

    model_config = ConfigDict(strict=True, extra="ignore")

    clientId: str = Field(..., description="The unique ID of the client.")
    clientName: str = Field(..., description="The client's full name.")
    note: str = Field(..., description="The full, formatted clinical note for the client.")

    def to_domain(self) -> GeneratedNote:
        return GeneratedNote(client_id=self.clientId, client_name=self.clientName, note=self.note)


_NOTES_ADAPTER = TypeAdapter(List[NotePayload])


# =============================================================================
# STAGE 2: PARSING
# =============================================================================


def parse_generated_notes(raw_text: str) -> List[GeneratedNote]:
    """
    Parse the note-generation response body.

    Args:
        raw_text: Response text from the LLM client

    Returns:
        Notes in response order

    Raises:
        ResponseSchemaError: If the body is not valid JSON or does not match
            the declared array-of-notes shape
    """
    try:
        payloads = _NOTES_ADAPTER.validate_json(raw_text or "")
    except ValidationError as e:
        errors = e.errors(include_url=False)
        if any(error["type"] == "json_invalid" for error in errors):
            raise ResponseSchemaError(
                f"Response is not valid JSON: {errors[0]['msg']}", errors=errors
            ) from e

        first = errors[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise ResponseSchemaError(
            f"Response does not match the notes contract at {location}: {first['msg']}",
            errors=errors,
        ) from e

    return [payload.to_domain() for payload in payloads]


# =============================================================================
# STAGE 3: FILTERING
# =============================================================================


@dataclass
class FilteredNotes:
    """
    Notes that survived filtering plus how many were dropped.

    Attributes:
        notes: Entries for requested clients, in response order
        dropped_count: Entries whose clientId was not requested
    """

    notes: List[GeneratedNote] = field(default_factory=list)
    dropped_count: int = 0


def filter_to_requested_clients(
    notes: Iterable[GeneratedNote], requested_ids: Iterable[str]
) -> FilteredNotes:
    """
    Keep only notes whose client_id was requested.

    Dropping entries is silent: the model sometimes invents or repeats
    clients, and that is not an error for the caller.
    """
    requested = set(requested_ids)
    kept = []
    dropped = 0
    for note in notes:
        if note.client_id in requested:
            kept.append(note)
        else:
            dropped += 1
            logger.debug(f"Dropping note for unrequested client id: {note.client_id}")

    return FilteredNotes(notes=kept, dropped_count=dropped)
