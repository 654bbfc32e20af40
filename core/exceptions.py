from typing import List, Dict


class SchemaValidationError(Exception):
    """
    Raised when data does not satisfy a flow schema.
    `violations` holds one entry per offending field: {"field": "a.b", "constraint": "..."}.
    """

    def __init__(self, schema_name: str, violations: List[Dict[str, str]]):
        self.schema_name = schema_name
        self.violations = violations
        details = "; ".join(f"{v['field']}: {v['constraint']}" for v in violations)
        super().__init__(f"{schema_name} validation failed: {details}")


class InputValidationError(SchemaValidationError):
    """Caller-supplied flow input violates the flow's input schema. Never recovered by a fallback."""

    def __init__(self, flow_name: str, violations: List[Dict[str, str]]):
        self.flow_name = flow_name
        super().__init__(f"{flow_name} input", violations)


class OutputValidationError(SchemaValidationError):
    """The model answered, but its JSON does not satisfy the flow's output schema."""


class ModelUnavailableError(Exception):
    """No language model is configured (e.g. GEMINI_API_KEY missing)."""
