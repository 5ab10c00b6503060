"""
Prompt templates for content generation.

Templates are plain data keyed by mood and goal; the builders only fill them in.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from selfcare.models.user import Preferences

from .config import ContentKind

MOOD_CONTEXTS: Dict[str, str] = {
    "stressed": "They need calming and grounding support.",
    "anxious": "They need reassurance and confidence building.",
    "sad": "They need uplifting and hope-inspiring words.",
    "neutral": "They are open to positive growth and motivation.",
    "happy": "They want to maintain and amplify their positive energy.",
    "excited": "They want to channel their energy productively.",
    "calm": "They want to maintain their peaceful state.",
    "energetic": "They want to use their energy for positive activities.",
}
DEFAULT_MOOD_CONTEXT = "They are seeking positive support."

GOAL_CONTEXTS: Dict[str, str] = {
    "stress_relief": "Focus on relaxation, breathing, and letting go of tension.",
    "confidence_building": "Emphasize self-worth, capabilities, and inner strength.",
    "relaxation": "Focus on peace, calm, and releasing tension.",
    "mindfulness": "Emphasize present moment awareness and acceptance.",
    "productivity": "Focus on motivation, focus, and accomplishment.",
    "sleep_improvement": "Emphasize rest, peace, and preparing for quality sleep.",
}
DEFAULT_GOAL_CONTEXT = "Support their personal growth journey."

TEMPLATES: Dict[ContentKind, str] = {
    ContentKind.AFFIRMATION: (
        "Create a personalized affirmation for someone who is feeling {mood} and wants to work on {goal}.\n"
        "{mood_context} {goal_context}\n"
        'The affirmation should be empowering, use "I" statements, and be 1-2 sentences long.\n'
        "Make it feel personal and uplifting."
    ),
    ContentKind.ACTIVITY: (
        "Create a {difficulty} level self-care activity for someone feeling {mood} who wants to work on {goal}.\n"
        "The activity should take about {duration} minutes. {type_preferences}\n"
        "Provide a clear title, description, and step-by-step instructions.\n"
        "Make it practical and doable at home or anywhere."
    ),
    ContentKind.JOURNALING_PROMPT: (
        "Create a thoughtful journaling prompt for someone feeling {mood} who wants to work on {goal}.\n"
        "{mood_context} {goal_context}\n"
        "The prompt should encourage self-reflection and emotional exploration."
    ),
    ContentKind.MOTIVATIONAL_MESSAGE: (
        "Create a brief, encouraging notification message for someone feeling {mood} who is working on {goal}.\n"
        "Context: {context}\n"
        "Keep it under 100 characters, positive, and actionable."
    ),
    ContentKind.WELLNESS_TIP: (
        "Provide a practical wellness tip for someone feeling {mood} who wants to work on {goal}.\n"
        "Make it actionable, science-based, and easy to implement in daily life.\n"
        "Keep it concise but informative."
    ),
}


@dataclass
class ContentProfile:
    """The slice of a user the prompts are personalised with"""

    current_mood: str
    primary_goal: str
    first_name: str = ""
    preferences: Preferences = field(default_factory=Preferences)

    @classmethod
    def from_user(cls, user) -> "ContentProfile":
        return cls(
            current_mood=user.current_mood,
            primary_goal=user.primary_goal,
            first_name=user.first_name or "",
            preferences=Preferences.from_stored(user.preferences),
        )


def get_mood_context(mood: str) -> str:
    return MOOD_CONTEXTS.get(mood, DEFAULT_MOOD_CONTEXT)


def get_goal_context(goal: str) -> str:
    return GOAL_CONTEXTS.get(goal, DEFAULT_GOAL_CONTEXT)


def _base_values(profile: ContentProfile) -> Dict[str, str]:
    return {
        "mood": profile.current_mood,
        "goal": profile.primary_goal,
        "mood_context": get_mood_context(profile.current_mood),
        "goal_context": get_goal_context(profile.primary_goal),
    }


def _activity_values(profile: ContentProfile) -> Dict[str, str]:
    content_prefs = profile.preferences.content_preferences
    types = [t.value for t in content_prefs.preferred_activity_types]
    return {
        "difficulty": content_prefs.difficulty_level.value,
        "duration": str(content_prefs.session_duration),
        "type_preferences": f"They prefer activities like: {', '.join(types)}." if types else "",
    }


def build_prompt(kind: ContentKind, profile: ContentProfile, context: Optional[str] = None) -> str:
    """Fill the template for ``kind`` with the user's profile"""
    values = _base_values(profile)
    if kind == ContentKind.ACTIVITY:
        values.update(_activity_values(profile))
    values["context"] = context or "general"
    prompt = TEMPLATES[kind].format(**values)
    if context and kind != ContentKind.MOTIVATIONAL_MESSAGE:
        prompt += f"\nAdditional request from the user: {context}"
    return prompt
