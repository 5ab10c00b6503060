"""Language-model content generation."""

from .config import KIND_CONFIGS, ContentKind, ModelConfig
from .exceptions import ContentGenerationError, GeminiAPICallError
from .generator import (
    ContentGenerator,
    GeminiContentGenerator,
    GeneratedContent,
    determine_activity_type,
    get_content_generator,
)
from .prompts import ContentProfile

__all__ = [
    "ContentKind",
    "ModelConfig",
    "KIND_CONFIGS",
    "ContentProfile",
    "ContentGenerator",
    "GeminiContentGenerator",
    "GeneratedContent",
    "ContentGenerationError",
    "GeminiAPICallError",
    "determine_activity_type",
    "get_content_generator",
]
