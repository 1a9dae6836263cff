"""
Clinical Note Assistant CLI

Command-line interface that runs one generation from a JSON request file and
prints the result: a JSON array of notes, or the assessment text.

Usage:
    python generate_session_notes.py notes request.json
    python generate_session_notes.py assessment request.json --provider openai
    python generate_session_notes.py notes request.json --dry-run

Notes request:
    {
      "noteType": "Group Counseling",
      "clientIds": ["client-1", "client-2"],      # seed roster, or
      "clients": [{"id": ..., "name": ..., "profile": {...}, "program_id": ...}],
      "programs": [...], "partners": [...],       # default: seed data
      "documents": [{"title": ..., "content": ...}],
      "intervention": "Relapse prevention planning",
      "selections": {"checkboxes": {"Mood/Affect": ["Anxious"]}, "narratives": {}}
    }

Assessment request:
    {
      "assessmentType": "Initial Assessment",
      "clientInfo": {"name": ..., "dateOfBirth": ..., "dateOfAssessment": ..., "clinicianName": ...},
      "assessmentData": {"presenting_problem": {"reason_for_referral": "..."}}
    }
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from clinical_note_assistant.core.config import AssistantConfiguration
from clinical_note_assistant.core.enums import AssessmentType, NoteType
from clinical_note_assistant.core.exceptions import ClinicalAssistantError, RosterError
from clinical_note_assistant.core.log_config import configure_logging
from clinical_note_assistant.core.models import (
    AssessmentClientInfo,
    Client,
    Document,
    Partner,
    Program,
    Selections,
)
from clinical_note_assistant.core.reference_data import SEED_PARTNERS, SEED_PROGRAMS, seed_clients
from clinical_note_assistant.generation import GenerationClient, PromptBuilder


# =============================================================================
# STAGE 1: ARGUMENT PARSING
# =============================================================================


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Example:
        >>> parser = create_argument_parser()
        >>> args = parser.parse_args(["notes", "request.json"])
    """
    parser = argparse.ArgumentParser(
        description="Generate clinical progress notes or assessments from a JSON request",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Generate group notes for two seed clients:
    python generate_session_notes.py notes sample_requests/group_session.json

  Generate an initial assessment with OpenAI:
    python generate_session_notes.py assessment sample_requests/initial_assessment.json --provider openai

  Print the prompt without calling the model:
    python generate_session_notes.py notes sample_requests/group_session.json --dry-run

Requirements:
  - Gemini: API_KEY (or GEMINI_API_KEY / GOOGLE_API_KEY)
  - OpenAI: OPENAI_API_KEY with --provider openai (or LLM_PROVIDER=openai)
  - A .env file in the working directory is loaded automatically
        """,
    )

    parser.add_argument("mode", choices=["notes", "assessment"], help="What to generate")
    parser.add_argument("request", type=Path, help="Path to the JSON request file")
    parser.add_argument(
        "--provider",
        choices=["gemini", "openai"],
        default=None,
        help="LLM provider (default: LLM_PROVIDER or gemini)",
    )
    parser.add_argument("--env-file", type=str, default=None, help="Path to a .env file")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="loguru level for stderr output (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the prompt that would be sent and exit without calling the model",
    )
    return parser


# =============================================================================
# STAGE 2: REQUEST LOADING
# =============================================================================


def load_request(path: Path) -> Dict[str, Any]:
    """Read a JSON request object from path."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError("Request file must contain a JSON object")
    return payload


def _resolve_clients(request: Dict[str, Any]) -> List[Client]:
    if "clients" in request:
        return [Client.from_dict(item) for item in request["clients"]]

    roster = {client.id: client for client in seed_clients()}
    clients = []
    for client_id in request.get("clientIds", []):
        if client_id not in roster:
            raise RosterError(f"Unknown client id: {client_id}", context={"client_id": client_id})
        clients.append(roster[client_id])
    return clients


def build_notes_arguments(request: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a notes request into keyword arguments for generate_notes."""
    programs = (
        [Program.from_dict(item) for item in request["programs"]]
        if "programs" in request
        else list(SEED_PROGRAMS)
    )
    partners = (
        [Partner.from_dict(item) for item in request["partners"]]
        if "partners" in request
        else list(SEED_PARTNERS)
    )
    documents = [
        Document.from_dict({"id": item.get("id", f"doc-{index}"), **item})
        for index, item in enumerate(request.get("documents", []), 1)
    ]

    return {
        "note_type": NoteType.from_string(request.get("noteType", NoteType.INDIVIDUAL.value)),
        "clients": _resolve_clients(request),
        "programs": programs,
        "partners": partners,
        "documents": documents,
        "intervention": request.get("intervention", ""),
        "selections": Selections.from_dict(request.get("selections", {})),
    }


def _assessment_data(raw: Any) -> Dict[str, Dict[str, str]]:
    """
    Normalise assessmentData to section id -> field id -> text.

    Numbers and booleans are written as text, null as blank.

    Raises:
        ValueError: If a section is not an object or a value is a list/object
    """
    if not isinstance(raw, dict):
        raise ValueError("assessmentData must be a JSON object")

    data = {}
    for section_id, fields in raw.items():
        if not isinstance(fields, dict):
            raise ValueError(f"assessmentData.{section_id} must be a JSON object")
        section = {}
        for field_id, value in fields.items():
            if isinstance(value, (dict, list)):
                raise ValueError(f"assessmentData.{section_id}.{field_id} must be text")
            section[field_id] = "" if value is None else str(value)
        data[section_id] = section
    return data


def build_assessment_arguments(request: Dict[str, Any]) -> Dict[str, Any]:
    """Turn an assessment request into keyword arguments for generate_assessment."""
    return {
        "client_info": AssessmentClientInfo.from_dict(request.get("clientInfo", {})),
        "assessment_type": AssessmentType.from_string(
            request.get("assessmentType", AssessmentType.INITIAL.value)
        ),
        "assessment_data": _assessment_data(request.get("assessmentData", {})),
    }


# =============================================================================
# STAGE 3: EXECUTION
# =============================================================================


async def run(args: argparse.Namespace, generation_client: Optional[GenerationClient] = None) -> str:
    """
    Execute one request and return the text to print.

    Raises:
        ClinicalAssistantError: On configuration, domain or generation failure
        ValueError: If the request is malformed
    """
    request = load_request(args.request)

    if args.mode == "notes":
        arguments = build_notes_arguments(request)
        if args.dry_run:
            return PromptBuilder().build_note_prompt(**arguments)
        client = generation_client or GenerationClient.from_environment(env_file=args.env_file)
        notes = await client.generate_notes(**arguments)
        return json.dumps([note.to_dict() for note in notes], indent=2, ensure_ascii=False)

    arguments = build_assessment_arguments(request)
    if args.dry_run:
        return PromptBuilder().build_assessment_prompt(**arguments)
    client = generation_client or GenerationClient.from_environment(env_file=args.env_file)
    assessment = await client.generate_assessment(**arguments)
    return assessment.assessment_text


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function to run the CLI.

    Step 1: Parse command-line arguments
    Step 2: Configure logging
    Step 3: Run the request
    Step 4: Print the result (exit code 1 on failure)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.provider:
        os.environ["LLM_PROVIDER"] = args.provider

    try:
        level = args.log_level or AssistantConfiguration.from_environment(
            env_file=args.env_file, validate_on_load=False
        ).log_level
        configure_logging(level.upper())

        output = asyncio.run(run(args))

    except ClinicalAssistantError as error:
        logger.error(error.message)
        return 1

    except (KeyError, TypeError, ValueError, OSError) as error:
        logger.error(f"Invalid request: {error}")
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
