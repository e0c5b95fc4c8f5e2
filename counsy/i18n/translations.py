"""
User-facing text for the presentation layer, with multi-language support.

Holds the canned responses shown when the AI completion service is
unavailable, plus short status messages. Uses a simple dictionary approach.
"""
import logging
import re
from typing import Any, Dict

logger = logging.getLogger(__name__)

# Translation dictionaries: language_code -> {key: translated_string}
TRANSLATIONS: Dict[str, Dict[str, Any]] = {
    "en": {
        # Counselor replies when the AI is unavailable
        "counselor_greeting": "Hello {name}! I'm running in Demo Mode right now (connection issue), but I'm still here to listen. How are you feeling?",
        "counselor_sad": "I'm sorry you're feeling this way. Remember, this feeling is temporary, and you are stronger than you know. (Demo Response)",
        "counselor_anxious": "Take a deep breath with me. Inhale... Exhale. Focus on this moment. You've got this. (Demo Response)",
        "counselor_thanks": "You're very welcome! I'm glad I could help.",
        "counselor_default": "I hear you, and I understand. I'm operating in offline mode currently, but I want you to know your feelings are valid. Tell me more?",

        # Mood insight when the AI is unavailable
        "mood_insight_offline": "Remember to take care of yourself today. (Offline Tip)",

        # Journal analysis when the AI is unavailable
        "journal_summary_offline": "Unable to analyze entry at the moment",
        "journal_insight_offline": "Keep writing to clear your mind.",
        "journal_recommendation_offline": "Try writing regularly to track your emotional patterns.",

        # Gamification
        "achievement_unlocked": "{icon} Achievement unlocked: {name}!",
        "focus_session_done": "Focus session complete! Overall streak: {streak} 🔥",
    },
    "es": {
        "counselor_greeting": "¡Hola {name}! Ahora mismo estoy en modo demo (problema de conexión), pero sigo aquí para escucharte. ¿Cómo te sientes?",
        "counselor_sad": "Siento que te sientas así. Recuerda que este sentimiento es temporal y que eres más fuerte de lo que crees. (Respuesta demo)",
        "counselor_anxious": "Respira hondo conmigo. Inhala... Exhala. Concéntrate en este momento. Tú puedes. (Respuesta demo)",
        "counselor_thanks": "¡De nada! Me alegra haber podido ayudar.",
        "counselor_default": "Te escucho y te entiendo. Ahora estoy en modo sin conexión, pero quiero que sepas que tus sentimientos son válidos. ¿Me cuentas más?",

        "mood_insight_offline": "Recuerda cuidarte hoy. (Consejo sin conexión)",

        "journal_summary_offline": "No es posible analizar la entrada en este momento",
        "journal_insight_offline": "Sigue escribiendo para despejar tu mente.",
        "journal_recommendation_offline": "Intenta escribir con regularidad para seguir tus patrones emocionales.",

        "achievement_unlocked": "{icon} ¡Logro desbloqueado: {name}!",
        "focus_session_done": "¡Sesión de enfoque completada! Racha total: {streak} 🔥",
    },
}

# Keyword groups that pick a canned counselor reply (checked in order)
COUNSELOR_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("counselor_greeting", ("hello", "hi", "hey", "hola")),
    ("counselor_sad", ("sad", "depressed", "lonely")),
    ("counselor_anxious", ("anxious", "anxiety", "stress", "stressed")),
    ("counselor_thanks", ("thank", "thanks", "gracias")),
]


def t(key: str, lang: str = 'en', **kwargs) -> str:
    """
    Translate a key to the specified language with optional formatting.

    Args:
        key: Translation key (e.g., 'counselor_default')
        lang: Language code (defaults to 'en')
        **kwargs: Format arguments for string formatting

    Returns:
        Translated and formatted string. Falls back to English if key not found.

    Examples:
        t('counselor_greeting', lang='es', name='Ana')
        t('achievement_unlocked', icon='🌱', name='Calm Starter')
    """
    lang_dict = TRANSLATIONS.get(lang, TRANSLATIONS['en'])

    translated = lang_dict.get(key, TRANSLATIONS['en'].get(key, f"[MISSING: {key}]"))

    if kwargs:
        try:
            return translated.format(**kwargs)
        except KeyError as e:
            logger.error(f"Translation formatting error for key '{key}': {e}")
            return translated

    return translated


def fallback_counselor_reply(user_message: str, user_name: str, lang: str = 'en') -> str:
    """
    Pick a canned counselor reply for when the AI is unavailable

    Matches whole words of the user's message against COUNSELOR_KEYWORDS.
    """
    words = set(re.findall(r"[a-záéíóúñ]+", user_message.lower()))

    for key, keywords in COUNSELOR_KEYWORDS:
        if any(word in words for word in keywords):
            return t(key, lang, name=user_name)

    return t("counselor_default", lang)
