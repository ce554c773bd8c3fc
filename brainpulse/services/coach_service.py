# coach service — pulse coach, the empathetic chat companion
# streams gemini answers through a langchain chain as server-sent events
#
# request flow:
#   1. scan the user message for crisis keywords (logged + resources sent first)
#   2. build a system prompt, personalised with recent mood context if available
#   3. fold the last few history turns into the human prompt
#   4. stream chunks from the llm as `data: {"content": ...}` events
#   5. always finish with `data: [DONE]`, even when the provider fails

import json
import logging
import random
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional, Sequence

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from brainpulse.config import settings
from brainpulse.models.coach import CoachMessage

logger = logging.getLogger(__name__)

DONE_EVENT = "data: [DONE]\n\n"

FALLBACK_REPLY = "I'm sorry, I'm having trouble responding right now. Please try again in a moment."

CRISIS_KEYWORDS = (
    "suicide",
    "kill myself",
    "end it all",
    "hopeless",
    "can't go on",
    "worthless",
    "better off dead",
    "want to die",
    "no point",
    "give up",
)

CRISIS_RESOURCES = (
    "It sounds like you're carrying something really heavy right now, and I'm glad you told me. "
    "You don't have to go through this alone. If you're in immediate danger, please call your local "
    "emergency number. In the US you can call or text 988 (Suicide & Crisis Lifeline) any time, "
    "or text HOME to 741741 to reach the Crisis Text Line."
)

SYSTEM_PROMPT = """You are Pulse Coach, a compassionate and empathetic AI mental health companion. Your role is to provide emotional support, active listening, and gentle guidance to users who may be experiencing various emotional challenges.

CORE PRINCIPLES:
- Be warm, empathetic, and non-judgmental
- Practice active listening and validate emotions
- Provide gentle guidance without being prescriptive
- Encourage professional help when appropriate
- Maintain appropriate boundaries as an AI companion

RESPONSE GUIDELINES:
- Keep responses conversational and supportive (2-4 sentences typically)
- Use empathetic language and acknowledge feelings
- Ask thoughtful follow-up questions to encourage reflection
- Offer practical coping strategies when appropriate
- Be genuine and avoid overly clinical language

CRISIS SITUATIONS:
If someone expresses suicidal thoughts or severe distress:
- Take it seriously and express concern
- Encourage immediate professional help
- Provide crisis hotline information
- Stay supportive while emphasizing the need for professional intervention

BOUNDARIES:
- You are not a replacement for professional therapy or medical care
- You cannot provide clinical diagnoses or medical advice
- Encourage users to seek professional help for persistent or severe issues
- Be honest about your limitations as an AI

Remember: Your goal is to be a supportive companion who helps users feel heard, validated, and gently guided toward better emotional wellbeing."""

# system prompt is passed as a variable so braces in user context never hit the template parser
COACH_PROMPT = ChatPromptTemplate.from_messages([
    ("system", "{system_prompt}"),
    ("human", "{prompt}"),
])

AFFIRMATIONS = {
    "low": [
        "You are stronger than you know, and this difficult moment will pass.",
        "Your feelings are valid, and you deserve compassion - especially from yourself.",
        "Every small step forward is progress worth celebrating.",
        "You have survived difficult times before, and you have the strength to get through this too.",
    ],
    "medium": [
        "You are exactly where you need to be in your journey of growth and healing.",
        "Your awareness of your emotions shows wisdom and emotional intelligence.",
        "You have the power to choose how you respond to life's challenges.",
        "Every day you choose to keep going is an act of courage.",
    ],
    "high": [
        "Your positive energy is a gift to yourself and those around you.",
        "You are creating a life filled with meaning and joy.",
        "Your resilience and optimism inspire growth and healing.",
        "You have the power to turn your dreams into reality.",
    ],
}

DEFAULT_INSIGHT = "Every emotion you experience is valuable information about your inner world and needs."


@dataclass
class CoachingContext:
    """recent mood data used to personalise the system prompt"""
    recent_moods: list[int] = field(default_factory=list)
    common_emotions: list[str] = field(default_factory=list)
    stress_level: Optional[float] = None
    sleep_quality: Optional[float] = None


def detect_crisis_keywords(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in CRISIS_KEYWORDS)


def generate_system_prompt(context: Optional[CoachingContext] = None) -> str:
    if context is None:
        return SYSTEM_PROMPT

    if context.recent_moods:
        mood_avg = f"{sum(context.recent_moods) / len(context.recent_moods):.1f}"
    else:
        mood_avg = "N/A"
    stress = f"{context.stress_level:.0f}" if context.stress_level else "N/A"
    sleep = f"{context.sleep_quality:.0f}" if context.sleep_quality else "N/A"

    return SYSTEM_PROMPT + f"""

USER CONTEXT:
- Recent mood average: {mood_avg}/10
- Common emotions: {", ".join(context.common_emotions) or "N/A"}
- Stress level: {stress}/10
- Sleep quality: {sleep}/10

Use this context to provide more personalized support, but don't explicitly mention these numbers unless relevant."""


def build_prompt(message: str, history: Sequence[CoachMessage], max_messages: Optional[int] = None) -> str:
    """fold the tail of the chat history into a single human prompt"""
    limit = settings.COACH_HISTORY_MESSAGES if max_messages is None else max_messages
    recent = list(history)[-limit:] if limit > 0 else []
    transcript = "\n".join(
        f"{'User' if msg.role == 'user' else 'Assistant'}: {msg.content}" for msg in recent
    )
    if transcript:
        return (
            f"Previous conversation context:\n{transcript}\n\n"
            f"Current user message: {message}\n\nPlease respond as Pulse Coach:"
        )
    return f"User message: {message}\n\nPlease respond as Pulse Coach:"


def sse_event(content: str, **extra) -> str:
    payload = {"content": content, **extra}
    return f"data: {json.dumps(payload)}\n\n"


def generate_affirmation(mood: int, emotions: Sequence[str] = (), rng: Optional[random.Random] = None) -> str:
    """pick an affirmation matching the mood band (<=4 low, >=7 high)"""
    if mood <= 4:
        category = "low"
    elif mood >= 7:
        category = "high"
    else:
        category = "medium"
    return (rng or random).choice(AFFIRMATIONS[category])


def generate_insight(moods: Sequence[float], emotions: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """one supportive observation about recent moods and emotions"""
    if not moods:
        return DEFAULT_INSIGHT

    avg_mood = sum(moods) / len(moods)
    trend = moods[-1] - moods[0] if len(moods) > 1 else 0

    insights = []
    if avg_mood >= 7:
        insights.append("You've been maintaining a positive mood lately - that's wonderful!")
    elif avg_mood <= 4:
        insights.append(
            "I notice you've been going through a challenging time. "
            "Remember that seeking support is a sign of strength."
        )

    if trend > 1:
        insights.append(
            "Your mood has been trending upward, which shows your resilience "
            "and the positive steps you're taking."
        )
    elif trend < -1:
        insights.append(
            "I see your mood has been declining. This might be a good time to focus "
            "on self-care and consider what support you need."
        )

    if "Anxious" in emotions or "Fear" in emotions:
        insights.append(
            "Anxiety seems to be a frequent visitor. Remember that anxiety often tries "
            "to protect us, even when it feels uncomfortable."
        )
    if "Grateful" in emotions or "Joy" in emotions:
        insights.append(
            "I love seeing gratitude and joy in your emotional landscape. These positive "
            "emotions can be powerful anchors during difficult times."
        )

    if not insights:
        return DEFAULT_INSIGHT
    return (rng or random).choice(insights)


# answer generation chain
_chain = None


def get_llm() -> ChatGoogleGenerativeAI:
    """create a gemini llm instance for coach replies"""
    return ChatGoogleGenerativeAI(
        model=settings.GEMINI_MODEL,
        google_api_key=settings.GEMINI_API_KEY,
        temperature=0.7,
        max_output_tokens=1024,
    )


def get_coach_chain():
    """get or create the coach streaming chain"""
    global _chain
    if _chain is None:
        _chain = COACH_PROMPT | get_llm() | StrOutputParser()
    return _chain


class CoachService:
    """streams pulse coach replies. the chain is any runnable with `astream`."""

    def __init__(self, chain=None):
        self._chain = chain

    @property
    def chain(self):
        if self._chain is None:
            self._chain = get_coach_chain()
        return self._chain

    async def stream_reply(
        self,
        message: str,
        history: Sequence[CoachMessage] = (),
        context: Optional[CoachingContext] = None,
    ) -> AsyncIterator[str]:
        """yield sse events for one coach turn"""
        if detect_crisis_keywords(message):
            logger.warning("Crisis keywords detected in coach message, sending resources")
            yield sse_event(CRISIS_RESOURCES, crisis=True)

        inputs = {
            "system_prompt": generate_system_prompt(context),
            "prompt": build_prompt(message, history),
        }

        try:
            async for chunk in self.chain.astream(inputs):
                if chunk:
                    yield sse_event(chunk)
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            yield sse_event(FALLBACK_REPLY)

        yield DONE_EVENT


def get_coach_service() -> CoachService:
    """dependency injection for the coach"""
    return CoachService()
