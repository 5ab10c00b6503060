"""
Content Generator
Turns a user profile into affirmations, activities, journaling prompts,
wellness tips and motivational messages.
"""

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional

from selfcare.models.enums import ActivityType, Difficulty
from selfcare.utils.logger import get_logger
from selfcare.utils.metrics import CONTENT_GENERATIONS

from .client import GeminiClient
from .config import ContentKind, get_kind_config
from .exceptions import ContentGenerationError, GeminiAPICallError
from .prompts import ContentProfile, build_prompt

logger = get_logger(__name__)

FALLBACK_ACTIVITY_TITLE = "Personalized Self-Care Activity"

# First matching keyword group wins
ACTIVITY_TYPE_KEYWORDS = [
    (ActivityType.MEDITATION, ("meditat", "mindful")),
    (ActivityType.JOURNALING, ("journal", "writ")),
    (ActivityType.BREATHING, ("breath", "inhale", "exhale")),
    (ActivityType.STRETCHING, ("stretch", "yoga")),
    (ActivityType.EXERCISE, ("exercise", "movement", "walk")),
    (ActivityType.SKINCARE, ("skin", "self-care routine")),
    (ActivityType.READING, ("read", "book")),
    (ActivityType.MUSIC, ("music", "listen")),
]

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


@dataclass
class GeneratedContent:
    """Result of a generation call, shaped for storing as an activity"""

    kind: ContentKind
    content: str
    title: Optional[str] = None
    description: Optional[str] = None
    activity_type: Optional[ActivityType] = None
    duration: Optional[int] = None
    difficulty: Optional[Difficulty] = None
    tags: List[str] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)
    prompt: Optional[str] = None


def determine_activity_type(text: str) -> ActivityType:
    """Infer an activity type from free text by keyword"""
    lowered = (text or "").lower()
    for activity_type, keywords in ACTIVITY_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return activity_type
    return ActivityType.CUSTOM


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Parse a JSON object from model output, tolerating markdown code fences"""
    cleaned = _CODE_FENCE.sub("", text.strip()).strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in prose
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            data = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError:
            return None
    return data if isinstance(data, dict) else None


def _coerce_duration(value: Any, default: int) -> int:
    try:
        duration = int(float(value))
    except (TypeError, ValueError):
        return default
    return duration if 1 <= duration <= 480 else default


def _coerce_difficulty(value: Any, default: Difficulty) -> Difficulty:
    try:
        return Difficulty(str(value).lower())
    except ValueError:
        return default


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


class ContentGenerator(ABC):
    """Capability interface for language-model content"""

    @abstractmethod
    async def generate(
        self,
        kind: ContentKind,
        profile: ContentProfile,
        context: Optional[str] = None,
    ) -> GeneratedContent:
        """Generate content of ``kind`` for a user profile.

        Raises:
            ContentGenerationError: If the provider call fails
        """


class GeminiContentGenerator(ContentGenerator):
    """ContentGenerator backed by Google Gemini"""

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient()

    async def generate(
        self,
        kind: ContentKind,
        profile: ContentProfile,
        context: Optional[str] = None,
    ) -> GeneratedContent:
        kind = ContentKind(kind)
        config = get_kind_config(kind)
        prompt = build_prompt(kind, profile, context)

        try:
            text = await self.client.generate_content(
                prompt,
                model=config.model,
                system_instruction=config.system_instruction,
                temperature=config.temperature,
                max_output_tokens=config.max_output_tokens,
            )
        except GeminiAPICallError as e:
            CONTENT_GENERATIONS.labels(kind=kind.value, outcome="error").inc()
            logger.error(f"Content generation failed for {kind.value}: {e.message}")
            raise ContentGenerationError(kind.value, original_error=e) from e

        CONTENT_GENERATIONS.labels(kind=kind.value, outcome="success").inc()

        if kind == ContentKind.ACTIVITY:
            return self._build_activity(text, profile, prompt)
        return self._build_text(kind, text, prompt)

    @staticmethod
    def _build_text(kind: ContentKind, text: str, prompt: str) -> GeneratedContent:
        if kind == ContentKind.JOURNALING_PROMPT:
            return GeneratedContent(
                kind=kind,
                content=text,
                title="Reflective Journaling",
                description="Take time to reflect and explore your thoughts",
                activity_type=ActivityType.JOURNALING,
                duration=10,
                prompt=prompt,
            )
        if kind == ContentKind.WELLNESS_TIP:
            return GeneratedContent(
                kind=kind,
                content=text,
                title="Wellness Tip",
                description="A practical tip for your wellbeing",
                activity_type=ActivityType.TIP,
                duration=2,
                prompt=prompt,
            )
        if kind == ContentKind.AFFIRMATION:
            return GeneratedContent(
                kind=kind,
                content=text,
                activity_type=ActivityType.AFFIRMATION,
                duration=1,
                prompt=prompt,
            )
        return GeneratedContent(kind=kind, content=text, prompt=prompt)

    @staticmethod
    def _build_activity(text: str, profile: ContentProfile, prompt: str) -> GeneratedContent:
        content_prefs = profile.preferences.content_preferences
        default_duration = content_prefs.session_duration
        default_difficulty = content_prefs.difficulty_level

        data = parse_json_object(text)
        if data is None:
            logger.warning("Activity response was not JSON, storing as plain text")
            return GeneratedContent(
                kind=ContentKind.ACTIVITY,
                content=text,
                title=FALLBACK_ACTIVITY_TITLE,
                description="A custom activity designed for your current needs",
                activity_type=determine_activity_type(text),
                duration=default_duration,
                difficulty=default_difficulty,
                tags=["personalized", profile.primary_goal],
                prompt=prompt,
            )

        title = str(data.get("title") or FALLBACK_ACTIVITY_TITLE)[:200]
        description = str(data.get("description") or "")
        steps = _string_list(data.get("steps"))
        content = description
        if steps:
            numbered = "\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1))
            content = f"{description}\n\n{numbered}" if description else numbered

        return GeneratedContent(
            kind=ContentKind.ACTIVITY,
            content=(content or text)[:2000],
            title=title,
            description=description[:500] or None,
            activity_type=determine_activity_type(f"{title} {description}"),
            duration=_coerce_duration(data.get("duration"), default_duration),
            difficulty=_coerce_difficulty(data.get("difficulty"), default_difficulty),
            tags=_string_list(data.get("tags")) or ["personalized", profile.primary_goal],
            steps=steps,
            prompt=prompt,
        )


@lru_cache()
def get_content_generator() -> ContentGenerator:
    """FastAPI dependency returning the process-wide generator"""
    return GeminiContentGenerator()
