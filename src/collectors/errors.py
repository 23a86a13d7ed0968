"""Error types for the source fetchers."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class SourceErrorClass(str, Enum):
    """Classification of source errors.

    - FETCH: A content store query failed
    - LOOKUP: A batched enrichment lookup failed
    """

    FETCH = "FETCH"
    LOOKUP = "LOOKUP"


class SourceFetchError(Exception):
    """Structured error raised or recorded for a failed source query."""

    def __init__(
        self,
        error_class: SourceErrorClass,
        message: str,
        source_id: str | None = None,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        """Initialize the source error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            source_id: Identifier of the source that failed.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.source_id = source_id
        self.details = details or {}

    def to_dict(
        self,
    ) -> dict[str, str | int | bool | None | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "source_id": self.source_id,
            "details": self.details,
        }


class ErrorRecord(BaseModel):
    """Serializable error record for per-source failure reporting."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: SourceErrorClass = Field(description="Error classification")
    message: Annotated[str, Field(min_length=1, description="Error message")]
    source_id: str | None = Field(default=None, description="Source identifier")
    details: dict[str, str | int | bool | None] = Field(
        default_factory=dict, description="Additional error details"
    )

    @classmethod
    def from_exception(cls, error: SourceFetchError) -> "ErrorRecord":
        """Create an ErrorRecord from a SourceFetchError exception.

        Args:
            error: The exception to convert.

        Returns:
            ErrorRecord instance.
        """
        return cls(
            error_class=error.error_class,
            message=error.message,
            source_id=error.source_id,
            details=error.details,
        )
