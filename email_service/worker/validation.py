from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    missing: List[str] = field(default_factory=list)


def validate_required_variables(required: Iterable[str], provided: Mapping[str, Any]) -> ValidationResult:
    # Absent or None is missing; "", 0 and False are present values
    provided = provided or {}
    missing = [name for name in (required or ()) if provided.get(name) is None]
    return ValidationResult(valid=not missing, missing=missing)
