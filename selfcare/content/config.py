"""
Content Generation Configuration
Content kinds and the generation parameters used for each of them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class ContentKind(str, Enum):
    """Kinds of content the language model can produce"""

    AFFIRMATION = "affirmation"
    ACTIVITY = "activity"
    JOURNALING_PROMPT = "journaling_prompt"
    WELLNESS_TIP = "wellness_tip"
    MOTIVATIONAL_MESSAGE = "motivational_message"


@dataclass
class ModelConfig:
    """Generation parameters for a specific content kind"""

    temperature: float = 0.7
    max_output_tokens: int = 400
    system_instruction: Optional[str] = None
    model: Optional[str] = None  # falls back to settings.gemini_model
    description: str = ""


KIND_CONFIGS: Dict[ContentKind, ModelConfig] = {
    ContentKind.AFFIRMATION: ModelConfig(
        temperature=0.8,
        max_output_tokens=150,
        system_instruction=(
            "You are a compassionate wellness coach specializing in creating personalized, "
            "uplifting affirmations. Your affirmations should be positive, empowering, and "
            "tailored to the user's specific needs and goals. Keep them concise (1-3 sentences) "
            "and use 'I' statements."
        ),
        description="Short first-person affirmation",
    ),
    ContentKind.ACTIVITY: ModelConfig(
        temperature=0.7,
        max_output_tokens=400,
        system_instruction=(
            "You are a wellness expert who creates personalized self-care activities. Provide "
            "practical, actionable activities that can be done at home or anywhere. Include clear "
            "step-by-step instructions. Format your response as JSON with 'title', 'description', "
            "'steps' (array), 'duration' (number in minutes), 'difficulty', and 'tags' (array) fields."
        ),
        description="Structured self-care activity (JSON)",
    ),
    ContentKind.JOURNALING_PROMPT: ModelConfig(
        temperature=0.8,
        max_output_tokens=200,
        system_instruction=(
            "You are a therapeutic journaling expert. Create thoughtful, introspective prompts that "
            "help users explore their emotions, thoughts, and goals. The prompts should be "
            "open-ended and encourage self-reflection."
        ),
        description="Open-ended journaling prompt",
    ),
    ContentKind.WELLNESS_TIP: ModelConfig(
        temperature=0.7,
        max_output_tokens=200,
        system_instruction=(
            "You are a wellness expert providing practical, science-based tips for mental health "
            "and self-care. Keep tips concise, actionable, and easy to implement in daily life."
        ),
        description="Practical wellness tip",
    ),
    ContentKind.MOTIVATIONAL_MESSAGE: ModelConfig(
        temperature=0.9,
        max_output_tokens=50,
        system_instruction=(
            "You are a supportive wellness coach. Create brief, encouraging messages for push "
            "notifications. Keep them under 100 characters, positive, and actionable. Use a warm, "
            "friendly tone."
        ),
        description="Notification-sized motivational message",
    ),
}


def get_kind_config(kind: ContentKind) -> ModelConfig:
    return KIND_CONFIGS[kind]
