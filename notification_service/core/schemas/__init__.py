from __future__ import annotations

from .auth import AuthUser
from .problem_details import FieldError, ProblemDetail, ValidationProblemDetail

__all__ = ["AuthUser", "FieldError", "ProblemDetail", "ValidationProblemDetail"]
