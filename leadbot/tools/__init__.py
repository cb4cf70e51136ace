"""Function calls the assistant may make mid-run."""

from .resolver import FunctionCallResolver, IFunctionCallResolver, ToolName
from .validation import ValidationResult, validate_lead_arguments

__all__ = [
    "ToolName",
    "IFunctionCallResolver",
    "FunctionCallResolver",
    "ValidationResult",
    "validate_lead_arguments",
]
