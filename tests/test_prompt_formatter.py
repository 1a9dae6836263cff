from clinical_note_assistant.core.models import (
    AssessmentField,
    AssessmentSection,
    Client,
    ClientProfile,
    Document,
    Selections,
)
from clinical_note_assistant.formatting import (
    format_assessment_data,
    format_client_profile,
    format_documents,
    format_selections,
)


class TestFormatClientProfile:
    def test_client_without_profile_is_a_single_line(self, bare_client, programs, partners):
        output = format_client_profile(bare_client, programs, partners)

        assert output == "### Client: Casey Moore (ID: c-2) - Profile data is not available."
        assert "\n" not in output

    def test_full_profile_renders_sections_in_order(self, full_client, programs, partners):
        output = format_client_profile(full_client, programs, partners)
        lines = output.split("\n")

        assert lines[0] == "### Client Information for: Jordan Lee (ID: c-1)"
        headings = [line for line in lines if line.startswith("#### ")]
        assert headings == [
            "#### Core Information",
            "#### Clinical Framework",
            "#### Strengths & Supports",
            "#### Barriers & Needs",
            "#### History",
        ]
        assert "- **Partner:** Lakeside Health" in lines
        assert "- **Program:** Intensive Outpatient (IOP)" in lines
        assert "- **Readiness Ruler:** 8/10" in lines
        assert "- **MBTI Type:** INFJ" in lines
        assert "- **Strengths:** Persistent, Honest" in lines
        assert "- **Support System:** Mother, NA group" in lines
        assert "- **Flags:** Trauma, Medical Conditions" in lines
        assert "- **Notes on History:** Completed detox in 2023." in lines

    def test_unresolved_program_omits_only_program_and_partner(self, full_client, partners):
        full_client.program_id = "prog-does-not-exist"

        output = format_client_profile(full_client, [], partners)

        assert "**Program:**" not in output
        assert "**Partner:**" not in output
        assert "- **Intake Date:** 2024-01-10" in output
        assert "#### Core Information" in output

    def test_unresolved_partner_keeps_program_line(self, programs, partners):
        client = Client(
            id="c-3",
            name="Riley",
            program_id="prog-orphan",
            profile=ClientProfile(intake_date="2024-05-01"),
        )

        output = format_client_profile(client, programs, partners)

        assert "- **Program:** Orphan Program" in output
        assert "**Partner:**" not in output

    def test_readiness_zero_is_present(self, programs, partners):
        client = Client(id="c-4", name="Ari", profile=ClientProfile(readiness_ruler=0))

        output = format_client_profile(client, programs, partners)

        assert "- **Readiness Ruler:** 0/10" in output

    def test_empty_sections_and_blank_fields_are_skipped(self, programs, partners):
        client = Client(
            id="c-5",
            name="Sky",
            profile=ClientProfile(presenting_problem="   ", strengths=["", "  "], mbti="ENTP"),
        )

        output = format_client_profile(client, programs, partners)

        assert output.split("\n") == [
            "### Client Information for: Sky (ID: c-5)",
            "#### Clinical Framework",
            "- **MBTI Type:** ENTP",
        ]

    def test_output_is_deterministic(self, full_client, programs, partners):
        first = format_client_profile(full_client, programs, partners)
        second = format_client_profile(full_client, programs, partners)

        assert first == second


class TestFormatSelections:
    def test_empty_selections_render_nothing(self):
        assert format_selections(Selections()) == ""
        assert format_selections(Selections(checkboxes={"Appearance": set()})) == ""

    def test_groups_and_options_follow_catalogue_order(self):
        selections = Selections(
            checkboxes={
                "Engagement": {"Supportive of peers", "Actively participated"},
                "Appearance": {"Well-groomed", "Wearing a hat", "Bright colors"},
            }
        )

        output = format_selections(selections)

        assert output.split("\n") == [
            "- **Appearance:** Well-groomed, Bright colors, Wearing a hat",
            "- **Engagement:** Actively participated, Supportive of peers",
        ]

    def test_narrative_follows_its_group(self):
        selections = Selections(
            checkboxes={"Mood/Affect": {"Anxious"}},
            narratives={"Mood/Affect": "Reported worry about court date.", "Risk Factors": ""},
        )

        output = format_selections(selections)

        assert output == (
            "- **Mood/Affect:** Anxious\n"
            "  - **Narrative:** Reported worry about court date."
        )

    def test_narrative_only_group_is_included(self):
        selections = Selections(narratives={"Client Response": "Open to feedback."})

        output = format_selections(selections)

        assert output.startswith("- **Client Response:**")
        assert "  - **Narrative:** Open to feedback." in output


class TestFormatDocuments:
    def test_no_documents_render_nothing(self):
        assert format_documents([]) == ""

    def test_each_document_appears_once_in_order(self):
        documents = [
            Document(id="d1", title="Planner A", content="Content alpha"),
            Document(id="d2", title="Planner B", content="Content beta"),
        ]

        output = format_documents(documents)

        assert output.count("--- Document: Planner A ---\nContent alpha") == 1
        assert output.count("--- Document: Planner B ---\nContent beta") == 1
        assert output.index("Planner A") < output.index("Planner B")
        assert output.endswith("--- End of Documents ---")


class TestFormatAssessmentData:
    SECTIONS = (
        AssessmentSection(
            id="first",
            title="First Section",
            fields=(AssessmentField("a", "Alpha"), AssessmentField("b", "Beta")),
        ),
        AssessmentSection(id="empty", title="Empty Section", fields=(AssessmentField("c", "Gamma"),)),
        AssessmentSection(id="second", title="Second Section", fields=(AssessmentField("d", "Delta"),)),
    )

    def test_only_filled_sections_in_declared_order(self):
        data = {
            "second": {"d": "  delta value  "},
            "empty": {"c": "   "},
            "first": {"b": "beta value", "a": "alpha value"},
        }

        output = format_assessment_data(self.SECTIONS, data)

        assert output == (
            "## First Section\n"
            "- **Alpha**\n  - alpha value\n"
            "- **Beta**\n  - beta value\n"
            "\n"
            "## Second Section\n"
            "- **Delta**\n  - delta value"
        )
        assert "Empty Section" not in output

    def test_unknown_sections_and_fields_are_ignored(self):
        data = {"first": {"zzz": "ignored"}, "unknown": {"x": "ignored"}}

        assert format_assessment_data(self.SECTIONS, data) == ""
