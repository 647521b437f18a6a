from dataclasses import dataclass, field
from typing import List
from .errors import ValidationError


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def success(cls, warnings: List[str] | None = None):
        return cls(is_valid=True, errors=[], warnings=list(warnings or []))

    @classmethod
    def failure(cls, errors: List[ValidationError]):
        return cls(is_valid=False, errors=errors)
