"""Squash fact model: the record stored in the notes ref for a squash root."""

from enum import Enum

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from squash_tree.exceptions import InvalidFact

# pydantic error types for a note body that is not a JSON object at all
MALFORMED_NOTE_ERRORS = ("json_invalid", "json_type", "model_type", "dict_type")


class SquashStrategy(str, Enum):
    """How a squash fact was recorded."""

    AUTO = "auto"
    MANUAL = "manual"


class SquashFact(BaseModel):
    """A recorded squash.

    ``root`` is the commit produced by the squash, ``base`` the commit the
    squashed commits branched from, and ``children`` the subsumed commits in
    their original order. Children order is meaningful and never re-sorted.
    """

    root: str = Field(..., min_length=1)
    base: str = Field(..., min_length=1)
    children: list[str] = Field(..., min_length=1)
    strategy: SquashStrategy = SquashStrategy.AUTO

    @field_validator("children")
    @classmethod
    def validate_children(cls, v: list[str]) -> list[str]:
        """Reject blank and duplicate children."""
        if any(not child for child in v):
            raise ValueError("children must not contain empty refs")
        if len(set(v)) != len(v):
            raise ValueError("children must be distinct")
        return v

    @model_validator(mode="after")
    def validate_root_placement(self) -> "SquashFact":
        """Root, base and children must all be distinct commits."""
        if self.root == self.base:
            raise ValueError("root and base must differ")
        if self.root in self.children:
            raise ValueError("root must not appear among its children")
        if self.base in self.children:
            raise ValueError("base must not appear among the children")
        return self

    @classmethod
    def create(
        cls,
        root: str,
        base: str,
        children: list[str],
        strategy: SquashStrategy | str = SquashStrategy.AUTO,
    ) -> "SquashFact":
        """Build a fact, raising InvalidFact instead of a pydantic error."""
        try:
            return cls(root=root, base=base, children=list(children), strategy=strategy)
        except ValidationError as e:
            raise InvalidFact(_first_error(e)) from e

    def to_note(self) -> str:
        """Serialize to the note body stored on the root commit."""
        return self.model_dump_json(indent=2)

    @classmethod
    def from_note(cls, text: str) -> "SquashFact":
        """Parse a note body.

        Raises:
            InvalidFact: If the note is not a valid squash record.
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            if any(err["type"] in MALFORMED_NOTE_ERRORS for err in e.errors()):
                raise InvalidFact(f"malformed squash note: {_first_error(e)}") from e
            raise InvalidFact(_first_error(e)) from e


def _first_error(error: ValidationError) -> str:
    """Human-readable summary of the first validation error."""
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
