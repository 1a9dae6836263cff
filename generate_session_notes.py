"""
Generate Session Notes

Runs one note or assessment generation from a JSON request file and prints
the result. See clinical_note_assistant.cli for the request format.

Usage:
    python generate_session_notes.py notes request.json
    python generate_session_notes.py assessment request.json
"""

import sys

from clinical_note_assistant.cli import main


if __name__ == "__main__":
    sys.exit(main())
