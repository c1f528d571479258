"""Diagnostic text explaining a failed tool call back to the model."""

from collections.abc import Mapping

from alecto.tools.domain.schema import ToolSchema


def build_recovery_message(
    tool_name: str,
    error_text: str,
    schema: ToolSchema | None,
    suggested_mappings: Mapping[str, str],
) -> str:
    """Describe the failure, the tool's expected parameters and any suggested renamings.

    Without a schema only the error itself can be reported.
    """
    message = f"Error using tool {tool_name}:\n{error_text}\n\n"
    if schema is None:
        return message

    params = schema.parameters
    message += "Expected parameters:\n"
    message += f"Required: {', '.join(params.required)}\n"
    message += f"Available: {', '.join(params.names)}\n\n"

    if suggested_mappings:
        message += "Suggested parameter mappings:\n"
        for provided, suggested in suggested_mappings.items():
            message += f"- {provided} → {suggested}\n"
    return message
