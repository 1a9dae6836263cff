import asyncio
import json
from pathlib import Path

import pytest

from clinical_note_assistant.cli import (
    build_assessment_arguments,
    build_notes_arguments,
    create_argument_parser,
    load_request,
    main,
    run,
)
from clinical_note_assistant.core.enums import AssessmentType, NoteType
from clinical_note_assistant.core.exceptions import RosterError
from clinical_note_assistant.generation import GenerationClient

from conftest import FakeLLMClient, notes_json


SAMPLE_DIR = Path(__file__).resolve().parent.parent / "sample_requests"


def _write_request(tmp_path, payload, name="request.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestRequestParsing:
    def test_sample_group_request(self):
        arguments = build_notes_arguments(load_request(SAMPLE_DIR / "group_session.json"))

        assert arguments["note_type"] is NoteType.GROUP
        assert [client.id for client in arguments["clients"]] == ["client-1", "client-2"]
        assert arguments["documents"][0].id == "doc-1"
        assert "Supportive of peers" in arguments["selections"].checkboxes["Engagement"]

    def test_sample_assessment_request(self):
        arguments = build_assessment_arguments(load_request(SAMPLE_DIR / "initial_assessment.json"))

        assert arguments["assessment_type"] is AssessmentType.INITIAL
        assert arguments["client_info"].name

    def test_inline_clients(self):
        arguments = build_notes_arguments(
            {"noteType": "individual", "clients": [{"id": "x-1", "name": "Pat", "programId": "p"}]}
        )

        assert arguments["note_type"] is NoteType.INDIVIDUAL
        assert arguments["clients"][0].program_id == "p"

    def test_unknown_seed_client(self):
        with pytest.raises(RosterError):
            build_notes_arguments({"clientIds": ["client-404"]})

    def test_request_must_be_object(self, tmp_path):
        with pytest.raises(ValueError):
            load_request(_write_request(tmp_path, ["not", "an", "object"]))

    def test_numeric_assessment_values_become_text(self):
        arguments = build_assessment_arguments(
            {"assessmentData": {"presenting_problem": {"reason_for_referral": 5, "notes": None}}}
        )

        assert arguments["assessment_data"] == {
            "presenting_problem": {"reason_for_referral": "5", "notes": ""}
        }

    @pytest.mark.parametrize(
        "assessment_data",
        [
            {"presenting_problem": {"reason_for_referral": ["court", "family"]}},
            {"presenting_problem": "Court referral"},
            ["presenting_problem"],
        ],
    )
    def test_malformed_assessment_data_is_rejected(self, assessment_data):
        with pytest.raises(ValueError):
            build_assessment_arguments({"assessmentData": assessment_data})


class TestRun:
    def test_notes_are_printed_as_json(self, tmp_path, config):
        path = _write_request(tmp_path, {"noteType": "Group Counseling", "clientIds": ["client-1"], "intervention": "x"})
        fake = FakeLLMClient([notes_json(("client-1", "Alex Rivera", "Note"))])
        args = create_argument_parser().parse_args(["notes", str(path)])

        output = asyncio.run(run(args, GenerationClient(config, llm_client=fake)))

        assert json.loads(output) == [{"clientId": "client-1", "clientName": "Alex Rivera", "note": "Note"}]

    def test_assessment_prints_text(self, config):
        fake = FakeLLMClient(["ASSESSMENT"])
        args = create_argument_parser().parse_args(
            ["assessment", str(SAMPLE_DIR / "initial_assessment.json")]
        )

        output = asyncio.run(run(args, GenerationClient(config, llm_client=fake)))

        assert output == "ASSESSMENT"


class TestMain:
    def test_dry_run_prints_prompt_without_key(self, clean_env, capsys):
        code = main(["notes", str(SAMPLE_DIR / "group_session.json"), "--dry-run"])

        assert code == 0
        printed = capsys.readouterr().out
        assert "**Note Type to Generate:** Group Counseling" in printed
        assert "(ID: client-1)" in printed

    def test_missing_key_exits_with_error(self, clean_env):
        assert main(["notes", str(SAMPLE_DIR / "group_session.json")]) == 1

    def test_missing_openai_key_exits_with_error(self, clean_env):
        code = main(
            ["assessment", str(SAMPLE_DIR / "initial_assessment.json"), "--provider", "openai"]
        )

        assert code == 1

    def test_missing_request_file(self, clean_env, tmp_path):
        assert main(["notes", str(tmp_path / "missing.json"), "--dry-run"]) == 1

    def test_program_without_id_exits_with_error(self, clean_env, tmp_path):
        path = _write_request(
            tmp_path,
            {"programs": [{"name": "IOP"}], "clients": [{"id": "x", "name": "Pat"}]},
        )

        assert main(["notes", str(path), "--dry-run"]) == 1

    def test_non_list_clients_exits_with_error(self, clean_env, tmp_path):
        path = _write_request(tmp_path, {"clients": 5})

        assert main(["notes", str(path), "--dry-run"]) == 1

    def test_text_readiness_is_converted(self, clean_env, tmp_path, capsys):
        path = _write_request(
            tmp_path, {"clients": [{"id": "x", "name": "Pat", "profile": {"readinessRuler": "6"}}]}
        )

        assert main(["notes", str(path), "--dry-run"]) == 0
        assert "- **Readiness Ruler:** 6/10" in capsys.readouterr().out

    def test_non_text_assessment_value_exits_with_error(self, clean_env, tmp_path):
        path = _write_request(
            tmp_path, {"assessmentData": {"presenting_problem": {"reason_for_referral": {"a": 1}}}}
        )

        assert main(["assessment", str(path), "--dry-run"]) == 1
