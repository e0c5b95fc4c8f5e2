"""
Prompt templates for the counselor, mood insights and journal analysis
"""
from counsy.models.journal import JournalAnalysis

COUNSELOR_NAME = "Counsy AI"

COUNSELOR_SYSTEM_PROMPT = """You are a compassionate, empathetic, and professional student wellness counselor named "{counselor_name}".
Your goal is to provide emotional support, stress management tips, and academic motivation.

The user's full name is "{user_name}". Address them by their name occasionally to create a personal connection.

Instructions:
- Always identify yourself as "{counselor_name}" if asked.
- Keep responses warm, short (under 60 words), and conversational.
- Validate feelings first.
- Offer actionable advice if appropriate.
- Do not diagnose medical conditions.
- Use emojis sparingly but effectively to be friendly."""

MOOD_INSIGHT_SYSTEM_PROMPT = "You are a supportive wellness counselor. Give brief, encouraging insights."

MOOD_INSIGHT_USER_PROMPT = (
    'The user is feeling "{mood}". Give a 1-sentence supportive insight or micro-tip for a student.'
)

JOURNAL_ANALYSIS_SYSTEM_PROMPT = (
    "You are a compassionate student wellness counselor analyzing journal entries. "
    "Provide supportive, encouraging insights that help students understand their emotions "
    "and improve their wellbeing."
)

JOURNAL_ANALYSIS_USER_PROMPT = """Analyze this student's journal entry and provide supportive insights:

"{text}"

Please provide:
1. A brief mood summary (1-2 sentences)
2. A productivity/wellness insight (1 sentence)
3. 2-3 supportive recommendations

Keep the tone encouraging and supportive. Focus on student wellness and mental health."""

DEFAULT_MOOD_SUMMARY = "Your emotions are valid and important."
DEFAULT_PRODUCTIVITY_INSIGHT = "Journaling helps process thoughts and feelings."
DEFAULT_RECOMMENDATIONS = [
    "Continue journaling regularly",
    "Practice self-compassion",
    "Reach out for support when needed",
]


def build_counselor_messages(
    user_message: str,
    user_name: str,
    history: list[dict[str, str]] | None = None,
) -> list[dict[str, str]]:
    """
    Build the message list for a counselor reply

    Args:
        user_message: The new message from the student
        user_name: Name used to personalise the reply
        history: Earlier turns as {"role": "user"|"assistant", "content": ...}
    """
    messages = [{
        "role": "system",
        "content": COUNSELOR_SYSTEM_PROMPT.format(counselor_name=COUNSELOR_NAME, user_name=user_name),
    }]
    messages.extend(history or [])
    messages.append({"role": "user", "content": user_message})
    return messages


def build_mood_insight_messages(mood: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": MOOD_INSIGHT_SYSTEM_PROMPT},
        {"role": "user", "content": MOOD_INSIGHT_USER_PROMPT.format(mood=mood)},
    ]


def build_journal_analysis_messages(text: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": JOURNAL_ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": JOURNAL_ANALYSIS_USER_PROMPT.format(text=text)},
    ]


def parse_journal_analysis(text: str) -> JournalAnalysis:
    """
    Split a journal analysis reply into its parts

    First non-empty line is the mood summary, the second the insight, the
    rest are recommendations. Missing parts get encouraging defaults.
    """
    lines = [line.strip() for line in text.split("\n") if line.strip()]

    return JournalAnalysis(
        mood_summary=lines[0] if len(lines) > 0 else DEFAULT_MOOD_SUMMARY,
        productivity_insight=lines[1] if len(lines) > 1 else DEFAULT_PRODUCTIVITY_INSIGHT,
        recommendations=lines[2:] if len(lines) > 2 else list(DEFAULT_RECOMMENDATIONS),
    )
