"""
FitForge AI Coach Service
Text chat with the Gemini coach. The mobile app keeps the conversation;
each request carries the history it wants the coach to see.
"""
from typing import Optional
from google import genai
from google.genai import types

from config import settings
from models import ChatMessage
from exercise_names import find_exercise_mentions
import exercisedb_service

# ============================================================
# Coach System Prompt
# ============================================================

COACH_SYSTEM_PROMPT = """
You are an expert fitness coach and nutritionist with over 15 years of experience
helping people reach their health and fitness goals. You give personalized,
science-based advice on:

- Workout programming and exercise technique
- Nutrition, meal planning and macro tracking
- Recovery, sleep and stress management
- Motivation and habit building
- Injury prevention and working around limitations

Guidelines:
- Be friendly, encouraging and supportive
- Give specific, actionable advice and explain the "why"
- Ask clarifying questions when needed
- Keep responses concise (2-3 paragraphs max)
- Never provide medical diagnoses or replace professional medical advice
- Use natural conversation without bullet points unless they really help
"""

# Gemini names the assistant role "model"
ROLE_MAP = {"user": "user", "assistant": "model"}

MAX_LINKED_EXERCISES = 3


# ============================================================
# Coach Service Class
# ============================================================

class CoachService:
    """Stateless chat wrapper around Gemini."""

    def __init__(self, client: Optional[genai.Client] = None):
        self.client = client or genai.Client(api_key=settings.GOOGLE_API_KEY)
        self.model = settings.GEMINI_MODEL

    @staticmethod
    def build_contents(message: str, history: list[ChatMessage]) -> list[types.Content]:
        """Convert client-held history plus the new message into Gemini contents."""
        contents = [
            types.Content(
                role=ROLE_MAP[m.role],
                parts=[types.Part.from_text(text=m.content)],
            )
            for m in history
            if m.content
        ]
        contents.append(
            types.Content(role="user", parts=[types.Part.from_text(text=message)])
        )
        return contents

    def chat(self, message: str, history: list[ChatMessage]) -> str:
        """Send a message to the coach and get the reply text."""
        response = self.client.models.generate_content(
            model=self.model,
            contents=self.build_contents(message, history),
            config=types.GenerateContentConfig(
                system_instruction=COACH_SYSTEM_PROMPT,
                temperature=0.7,
                max_output_tokens=500,
            ),
        )
        text = response.text
        if not text:
            raise ValueError("No content in response")
        return text.strip()


def lookup_mentioned_exercises(reply: str) -> list[dict]:
    """
    ExerciseDB records for exercises the coach mentioned.
    Lookups that fail are skipped; the chat reply never depends on them.
    """
    exercises = []
    for name in find_exercise_mentions(reply, limit=MAX_LINKED_EXERCISES):
        try:
            results = exercisedb_service.by_name(name, limit=1)
        except Exception as e:
            print(f"[Coach] Failed to fetch exercise '{name}': {e}")
            continue
        if isinstance(results, list) and results:
            exercises.append(results[0])
    return exercises


# ============================================================
# Convenience function for one-off queries
# ============================================================

_coach: Optional[CoachService] = None


def get_coach() -> CoachService:
    """Get shared coach (singleton)."""
    global _coach
    if _coach is None:
        _coach = CoachService()
    return _coach


def generate_chat_response(message: str, history: list[ChatMessage]) -> str:
    return get_coach().chat(message, history)
