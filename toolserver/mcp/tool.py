"""
MCP Tool - Abstract base class for all tools.

Argument handling is two-phase:
1. Schema validation of the raw payload against the declared JSON Schema
2. Strict typed decoding into the tool's pydantic parameter model

Only the decoded parameters ever reach execute().
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Optional, Type

import jsonschema
from pydantic import BaseModel, ValidationError

from .protocol import Content, ToolSpec
from .session import Session


class InvalidArgumentsError(ValueError):
    """Raised when a payload fails schema validation or typed decoding."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ToolExecutionError(RuntimeError):
    """Raised by a tool when it fails to produce a result."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.details = details or {}


def _field_path(path) -> str:
    return ".".join(str(part) for part in path) or "$"


class Tool(ABC):
    """
    Abstract base class for all tools.

    Subclasses set:
    - name, description
    - input_schema: declarative JSON Schema for the raw payload
    - params_model: pydantic model the validated payload decodes into

    and implement execute(params, session).
    """

    name: ClassVar[str]
    description: ClassVar[str] = ""
    input_schema: ClassVar[Dict[str, Any]]
    params_model: ClassVar[Type[BaseModel]]

    def get_spec(self) -> ToolSpec:
        """Return tool specification."""
        return ToolSpec(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema,
        )

    def validate_arguments(self, arguments: Any) -> None:
        """
        Check the raw payload against input_schema.

        Raises:
            InvalidArgumentsError: With one entry per schema violation
        """
        validator_cls = jsonschema.validators.validator_for(self.input_schema)
        validator = validator_cls(self.input_schema)
        violations = sorted(validator.iter_errors(arguments), key=lambda e: [str(part) for part in e.absolute_path])
        if not violations:
            return

        errors = [
            {
                "field": _field_path(violation.absolute_path),
                "reason": violation.message,
                "validator": violation.validator,
            }
            for violation in violations
        ]
        raise InvalidArgumentsError(
            f"Payload does not match schema: {violations[0].message}",
            errors=errors,
        )

    def decode_arguments(self, arguments: Dict[str, Any]) -> BaseModel:
        """
        Decode a schema-valid payload into params_model.

        Raises:
            InvalidArgumentsError: If typed decoding fails
        """
        try:
            return self.params_model.model_validate(arguments, strict=True)
        except ValidationError as exc:
            errors = [
                {
                    "field": _field_path(error.get("loc", ())),
                    "reason": error.get("msg", ""),
                    "validator": error.get("type", ""),
                }
                for error in exc.errors()
            ]
            first = errors[0] if errors else {"field": "$", "reason": str(exc)}
            raise InvalidArgumentsError(
                f"Cannot decode arguments: {first['field']}: {first['reason']}",
                errors=errors,
            ) from exc

    def parse_arguments(self, arguments: Any) -> BaseModel:
        """Run both validation phases and return typed parameters."""
        self.validate_arguments(arguments)
        return self.decode_arguments(arguments)

    @abstractmethod
    async def execute(self, params: BaseModel, session: Session) -> List[Content]:
        """
        Execute tool logic.

        Args:
            params: Decoded, validated parameters
            session: Caller's session

        Returns:
            Ordered content items

        Raises:
            Exception: Any execution error
        """
