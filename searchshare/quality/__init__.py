"""
Input Quality

Validation of keyword payloads before analysis.
"""

from .validators import InputValidator, ValidationResult

__all__ = [
    "InputValidator",
    "ValidationResult",
]
