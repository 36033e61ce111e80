"""Rule set configuration for commit message evaluation."""
from typing import FrozenSet, Iterable, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .models import DEFAULT_TYPES

MAX_HEADER_LENGTH = 150


class ConfigurationError(ValueError):
    """Raised when rule values are invalid, before any message is evaluated."""


class RuleSet(BaseModel):
    """Immutable set of checks applied to every parsed message.

    Build one per run and pass it explicitly to the evaluator and the
    batch validator.
    """

    allowed_types: FrozenSet[str] = Field(
        default=DEFAULT_TYPES,
        description="Commit types accepted in the header",
    )

    require_scope: bool = Field(
        default=False,
        description="Whether every header must carry a (scope)",
    )

    min_subject_length: int = Field(
        default=1,
        description="Minimum subject length in characters",
    )

    max_subject_length: int = Field(
        default=100,
        description="Maximum subject length in characters",
    )

    max_header_length: int = Field(
        default=MAX_HEADER_LENGTH,
        description="Maximum length of the whole header line",
    )

    model_config = {"frozen": True}

    @field_validator("allowed_types", mode="before")
    @classmethod
    def _normalise_types(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        return frozenset(t.strip().lower() for t in value if t and t.strip())

    @model_validator(mode="after")
    def _check_bounds(self) -> "RuleSet":
        if not self.allowed_types:
            raise ValueError("allowed types must not be empty")
        if self.min_subject_length < 1:
            raise ValueError(
                f"minimum subject length must be at least 1 (got {self.min_subject_length})"
            )
        if self.min_subject_length > self.max_subject_length:
            raise ValueError(
                "minimum subject length "
                f"({self.min_subject_length}) exceeds maximum ({self.max_subject_length})"
            )
        return self


def build_rule_set(
    allowed_types: Optional[Iterable[str]] = None,
    require_scope: bool = False,
    min_subject_length: int = 1,
    max_subject_length: int = 100,
) -> RuleSet:
    """Build a RuleSet, converting validation failures into ConfigurationError.

    Args:
        allowed_types: Iterable of types or a comma-separated string. Defaults
            to the standard Conventional Commits types.
        require_scope: Whether a scope is mandatory
        min_subject_length: Minimum subject length
        max_subject_length: Maximum subject length

    Returns:
        RuleSet: The validated, immutable rule set

    Raises:
        ConfigurationError: If the values violate the rule set invariants
    """
    values = {
        "require_scope": require_scope,
        "min_subject_length": min_subject_length,
        "max_subject_length": max_subject_length,
    }
    if allowed_types is not None:
        values["allowed_types"] = allowed_types
    try:
        return RuleSet(**values)
    except ValidationError as e:
        messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise ConfigurationError(messages) from e
