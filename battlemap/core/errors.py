"""
Battlemap Engine - Custom Error Types
Structured exceptions for map generation errors with recovery hints.
"""
from typing import Dict, Any, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the map engine."""
    # General errors
    UNKNOWN = "UNKNOWN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Configuration errors
    CONFIGURATION_INVALID = "CONFIGURATION_INVALID"
    INVALID_DIMENSIONS = "INVALID_DIMENSIONS"
    UNKNOWN_ALGORITHM = "UNKNOWN_ALGORITHM"
    UNKNOWN_THEME = "UNKNOWN_THEME"
    INVALID_PARAMETER = "INVALID_PARAMETER"

    # Codec errors
    COMPRESSED_DATA_MALFORMED = "COMPRESSED_DATA_MALFORMED"


class MapGenerationError(Exception):
    """
    Base exception for all map engine errors.

    Provides structured error information with:
    - Error code for programmatic handling
    - Human-readable message
    - Additional context details
    - Recovery hints for API clients
    """

    def __init__(
        self,
        code: ErrorCode = ErrorCode.UNKNOWN,
        message: str = "An unexpected error occurred",
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
        recovery_hint: Optional[str] = None,
        http_status: int = 500
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint
        self.http_status = http_status

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
                "recoverable": self.recoverable,
                "recovery_hint": self.recovery_hint
            }
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(MapGenerationError):
    """Generation request rejected before any random draw."""

    def __init__(
        self,
        message: str = "Invalid generation configuration",
        code: ErrorCode = ErrorCode.CONFIGURATION_INVALID,
        **kwargs
    ):
        kwargs.setdefault("http_status", 400)
        kwargs.setdefault("recovery_hint", "Correct the configuration and retry")
        super().__init__(code=code, message=message, **kwargs)


class InvalidDimensionsError(ConfigurationError):
    """Raised when width or height is not an integer in [1, max_size]."""

    def __init__(self, width: Any = None, height: Any = None, max_size: Optional[int] = None):
        details: Dict[str, Any] = {"width": width, "height": height}
        if max_size is not None:
            details["max_size"] = max_size
            message = f"Map dimensions must be between 1 and {max_size}, got {width}x{height}"
            hint = f"Use a width and height between 1 and {max_size}"
        else:
            message = f"Map dimensions must be positive, got {width}x{height}"
            hint = "Use a width and height of at least 1"
        super().__init__(
            code=ErrorCode.INVALID_DIMENSIONS,
            message=message,
            details=details,
            recovery_hint=hint
        )


class UnknownAlgorithmError(ConfigurationError):
    """Raised when the requested layout algorithm does not exist."""

    def __init__(self, algorithm: Any, available: Optional[list] = None):
        details: Dict[str, Any] = {"algorithm": algorithm}
        if available:
            details["available"] = available
        super().__init__(
            code=ErrorCode.UNKNOWN_ALGORITHM,
            message=f"Unknown algorithm: {algorithm}",
            details=details,
            recovery_hint="Choose one of the available algorithms"
        )


class UnknownThemeError(ConfigurationError):
    """Raised when the requested theme does not exist."""

    def __init__(self, theme: Any, available: Optional[list] = None):
        details: Dict[str, Any] = {"theme": theme}
        if available:
            details["available"] = available
        super().__init__(
            code=ErrorCode.UNKNOWN_THEME,
            message=f"Unknown theme: {theme}",
            details=details,
            recovery_hint="Choose one of the available themes"
        )


class InvalidParameterError(ConfigurationError):
    """Raised when a generation knob is unknown or out of range."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(
            code=ErrorCode.INVALID_PARAMETER,
            message=message,
            details={"errors": errors or []}
        )


# =============================================================================
# Codec Errors
# =============================================================================

class MalformedCompressedDataError(MapGenerationError):
    """Raised when compressed data cannot be reconstructed exactly."""

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCode.COMPRESSED_DATA_MALFORMED,
            message=reason,
            details=details,
            http_status=422,
            recovery_hint="Re-export the map from its generator and try again"
        )
