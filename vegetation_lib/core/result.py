"""
Operation result types for structured feedback.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
from enum import Enum


class OperationStatus(Enum):
    """Status of an operation."""
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"
    WARNING = "warning"


class ErrorCode(Enum):
    """Standard error codes for generation reports."""
    PLACEMENT_UNDERFILLED = "PLACEMENT_UNDERFILLED"
    NO_SPECIES = "NO_SPECIES"
    DEPTH_MISMATCH = "DEPTH_MISMATCH"
    CYCLE_DETECTED = "CYCLE_DETECTED"
    DISCONNECTED_NODE = "DISCONNECTED_NODE"
    TERMINALS_MISMATCH = "TERMINALS_MISMATCH"
    RADIUS_NOT_MONOTONIC = "RADIUS_NOT_MONOTONIC"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    UNKNOWN_ARCHETYPE = "UNKNOWN_ARCHETYPE"


@dataclass
class OperationResult:
    """
    Structured result from a generation or analysis operation.
    """

    status: OperationStatus
    message: str = ""
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    error_codes: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def is_success(self) -> bool:
        """Check if operation was successful."""
        return self.status in (OperationStatus.SUCCESS, OperationStatus.PARTIAL_SUCCESS)

    def is_failure(self) -> bool:
        """Check if operation failed."""
        return self.status == OperationStatus.FAILURE

    def add_warning(self, warning: str, code: Optional[ErrorCode] = None) -> None:
        """Add a warning message with optional code."""
        self.warnings.append(warning)
        if code is not None:
            self.error_codes.append(code.value)

    def add_error(self, error: str, code: Optional[ErrorCode] = None) -> None:
        """Add an error message with optional error code."""
        self.errors.append(error)
        if code is not None:
            self.error_codes.append(code.value)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization (JSON-safe)."""
        return {
            "status": self.status.value,
            "message": self.message,
            "warnings": self.warnings,
            "errors": self.errors,
            "error_codes": self.error_codes,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "OperationResult":
        """Create from dictionary."""
        return cls(
            status=OperationStatus(d["status"]),
            message=d.get("message", ""),
            warnings=d.get("warnings", []),
            errors=d.get("errors", []),
            error_codes=d.get("error_codes", []),
            metadata=d.get("metadata", {}),
        )

    @classmethod
    def success(cls, message: str = "", **kwargs) -> "OperationResult":
        """Create a success result."""
        return cls(status=OperationStatus.SUCCESS, message=message, **kwargs)

    @classmethod
    def failure(cls, message: str = "", **kwargs) -> "OperationResult":
        """Create a failure result."""
        return cls(status=OperationStatus.FAILURE, message=message, **kwargs)

    @classmethod
    def partial_success(cls, message: str = "", **kwargs) -> "OperationResult":
        """Create a partial success result."""
        return cls(status=OperationStatus.PARTIAL_SUCCESS, message=message, **kwargs)
