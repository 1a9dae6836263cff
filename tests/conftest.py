"""Shared fixtures: roster records, configuration and an in-memory LLM client."""

import json
import os
from typing import List, Optional

import pytest

from clinical_note_assistant.core.config import AssistantConfiguration
from clinical_note_assistant.core.models import (
    Client,
    ClientProfile,
    Partner,
    Program,
    ResponseContract,
)
from clinical_note_assistant.generation import GenerationClient


class FakeLLMClient:
    """Returns canned responses and records every prompt it receives."""

    def __init__(self, responses: Optional[List[object]] = None):
        self._responses = list(responses or [])
        self.calls: List[tuple] = []

    async def generate(self, prompt: str, contract: Optional[ResponseContract] = None) -> str:
        self.calls.append((prompt, contract))
        response = self._responses.pop(0) if self._responses else "[]"
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def model_name(self) -> str:
        return "fake-model"

    @property
    def provider_name(self) -> str:
        return "fake"


def notes_json(*entries: tuple) -> str:
    """Serialize (client_id, client_name, note) tuples as a notes response body."""
    return json.dumps(
        [{"clientId": cid, "clientName": name, "note": note} for cid, name, note in entries]
    )


@pytest.fixture
def partners() -> List[Partner]:
    return [Partner(id="partner-a", name="Lakeside Health")]


@pytest.fixture
def programs() -> List[Program]:
    return [
        Program(id="prog-a-1", name="Intensive Outpatient (IOP)", partner_id="partner-a"),
        Program(id="prog-orphan", name="Orphan Program", partner_id="partner-missing"),
    ]


@pytest.fixture
def full_client() -> Client:
    return Client(
        id="c-1",
        name="Jordan Lee",
        program_id="prog-a-1",
        profile=ClientProfile(
            intake_date="2024-01-10",
            presenting_problem="Opioid use disorder",
            stage_of_change="Action",
            primary_motivators="Keeping a new job",
            readiness_ruler=8,
            mbti="INFJ",
            strengths=["Persistent", "Honest"],
            skills_and_hobbies=["Drawing"],
            support_system=["Mother", "NA group"],
            barriers=["Housing"],
            case_management_needs=["Medicaid renewal"],
            history_of_trauma=True,
            significant_medical_conditions=True,
            notes_on_history="Completed detox in 2023.",
        ),
    )


@pytest.fixture
def bare_client() -> Client:
    return Client(id="c-2", name="Casey Moore")


@pytest.fixture
def config() -> AssistantConfiguration:
    return AssistantConfiguration(gemini_api_key="test-key")


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def generation_client(config, fake_llm) -> GenerationClient:
    return GenerationClient(config, llm_client=fake_llm)


ASSISTANT_ENV_VARS = (
    "LLM_PROVIDER",
    "API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "OPENAI_API_KEY",
    "GEMINI_MODEL",
    "OPENAI_MODEL",
    "LLM_TEMPERATURE",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment without assistant settings, run from an empty directory."""
    for name in ASSISTANT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield monkeypatch
    # load_dotenv and --provider write os.environ directly
    for name in ASSISTANT_ENV_VARS:
        os.environ.pop(name, None)
