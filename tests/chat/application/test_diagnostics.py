"""Tests for the recovery diagnostic text."""

from alecto.chat.application.diagnostics import build_recovery_message
from alecto.tools.domain.schema import ToolSchema
from tests.tools.fake_provider import make_descriptor


def _make_schema() -> ToolSchema:
    return ToolSchema.from_descriptor(
        make_descriptor(
            "search",
            properties={"query": {"type": "string"}, "limit": {"type": "integer"}},
            required=["query"],
        )
    )


class TestBuildRecoveryMessage:
    def test_full_message_layout(self) -> None:
        message = build_recovery_message(
            tool_name="search",
            error_text="Error: missing query",
            schema=_make_schema(),
            suggested_mappings={"qry": "query"},
        )

        assert message == (
            "Error using tool search:\n"
            "Error: missing query\n\n"
            "Expected parameters:\n"
            "Required: query\n"
            "Available: query, limit\n\n"
            "Suggested parameter mappings:\n"
            "- qry → query\n"
        )

    def test_no_mappings_section_without_suggestions(self) -> None:
        message = build_recovery_message(
            tool_name="search", error_text="Error", schema=_make_schema(), suggested_mappings={}
        )

        assert "Expected parameters:" in message
        assert "Suggested parameter mappings" not in message

    def test_unknown_schema_reports_only_error(self) -> None:
        message = build_recovery_message(
            tool_name="ghost", error_text="Error: gone", schema=None, suggested_mappings={}
        )

        assert message == "Error using tool ghost:\nError: gone\n\n"
