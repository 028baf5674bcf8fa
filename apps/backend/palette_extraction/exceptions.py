"""
Exception hierarchy for palette extraction.

Only caller-resource failures (an unusable page handle) escape the
pipeline. Everything else is caught at the category or stage boundary
and turned into fewer candidates.
"""

from typing import Optional, Dict, Any


class PaletteExtractionError(Exception):
    """Base exception for all palette extraction errors"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


# === Caller-resource exceptions ===

class PageHandleError(PaletteExtractionError):
    """The supplied page handle cannot be used for extraction"""
    pass


# === Stage exceptions ===

class ExtractionStageError(PaletteExtractionError):
    """An extraction stage failed as a whole"""

    def __init__(self, stage: str, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.stage = stage
        self.context.update({'stage': stage})


class StructuralExtractionError(ExtractionStageError):
    """Computed-style scan failed"""

    def __init__(self, message: str, **kwargs):
        super().__init__('structural', message, **kwargs)


class PerceptualExtractionError(ExtractionStageError):
    """Viewport capture or quantization failed"""

    def __init__(self, message: str, **kwargs):
        super().__init__('perceptual', message, **kwargs)


class CaptureTimeoutError(PerceptualExtractionError):
    """Viewport capture did not finish within the timeout"""

    def __init__(self, timeout_ms: int, **kwargs):
        super().__init__(f"Viewport capture exceeded {timeout_ms}ms", **kwargs)
        self.timeout_ms = timeout_ms
        self.context.update({'timeout_ms': timeout_ms})


class QuantizationError(PerceptualExtractionError):
    """Captured image could not be decoded or quantized"""
    pass


# === Configuration exceptions ===

class ConfigurationError(PaletteExtractionError):
    """Configuration error"""
    pass


class InvalidConfigError(ConfigurationError):
    """Invalid configuration value"""

    def __init__(self, field_name: str, value: Any, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.field_name = field_name
        self.value = value
        self.context.update({'field': field_name, 'value': value})
