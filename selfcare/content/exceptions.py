"""
Content Generation Exceptions
Errors raised while talking to the language model
"""

from typing import Optional


class GeminiAPICallError(Exception):
    """Raised when a Gemini API call fails"""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        is_quota_error: bool = False,
    ):
        self.message = message
        self.original_error = original_error
        self.is_quota_error = is_quota_error
        super().__init__(self.message)


class ContentGenerationError(Exception):
    """Raised when content of a given kind could not be produced"""

    def __init__(self, kind: str, original_error: Optional[Exception] = None):
        self.kind = kind
        self.original_error = original_error
        self.message = f"Failed to generate {kind}"
        super().__init__(self.message)
