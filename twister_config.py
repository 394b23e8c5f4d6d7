"""Game options and validation for the setup screen."""

from typing import Optional

from game.models import SessionSettings


# ============================================================================
# PREDEFINED OPTIONS
# ============================================================================

PRESET_TOPICS = ["Animals", "Tech", "Food"]

# (value, label, word hint) per difficulty choice
LENGTH_OPTIONS = [
    ("short", "Easy", "~5 words"),
    ("medium", "Medium", "~10 words"),
    ("long", "Hard", "~20 words"),
    ("custom", "Custom", "5-40 words"),
]
LENGTH_CLASSES = [value for value, _, _ in LENGTH_OPTIONS]

CUSTOM_WORDS_MIN = 5
CUSTOM_WORDS_MAX = 40
DEFAULT_CUSTOM_WORDS = 10

ROUND_MIN = 1
ROUND_MAX = 10
DEFAULT_ROUNDS = 5

MIN_CUSTOM_TOPIC_LENGTH = 2

AUTO_CHECK_DELAY_OPTIONS = [1000, 2000, 3000, 5000]
DEFAULT_AUTO_CHECK_DELAY = 2000


def length_choices() -> list:
    """(label, value) pairs for a Gradio radio."""
    return [(f"{label} ({hint})", value) for value, label, hint in LENGTH_OPTIONS]


# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================


def validate_topic(custom_topic: str, preset_topic: str = "") -> str:
    """Pick the custom topic when given, else the preset.

    Raises:
        ValueError: If neither is set or the custom topic is too short
    """
    custom_topic = (custom_topic or "").strip()
    if custom_topic:
        if len(custom_topic) < MIN_CUSTOM_TOPIC_LENGTH:
            raise ValueError(
                f"Custom topic must be at least {MIN_CUSTOM_TOPIC_LENGTH} characters"
            )
        return custom_topic

    if not preset_topic:
        raise ValueError("Please select or enter a topic")
    if preset_topic not in PRESET_TOPICS:
        raise ValueError(
            f"Invalid topic: '{preset_topic}'. Must be one of: {', '.join(PRESET_TOPICS)}"
        )
    return preset_topic


def validate_length(value: str) -> str:
    if not value:
        return "medium"
    if value not in LENGTH_CLASSES:
        raise ValueError(
            f"Invalid difficulty: '{value}'. Must be one of: {', '.join(LENGTH_CLASSES)}"
        )
    return value


def validate_custom_word_count(length: str, value: Optional[float]) -> Optional[int]:
    """Word count for custom length, None for the preset lengths."""
    if length != "custom":
        return None
    if value is None:
        return DEFAULT_CUSTOM_WORDS
    count = int(value)
    if count < CUSTOM_WORDS_MIN or count > CUSTOM_WORDS_MAX:
        raise ValueError(
            f"Custom difficulty must be between {CUSTOM_WORDS_MIN} and {CUSTOM_WORDS_MAX} words"
        )
    return count


def validate_rounds(value: Optional[float]) -> int:
    if value is None:
        return DEFAULT_ROUNDS
    rounds = int(value)
    if rounds < ROUND_MIN or rounds > ROUND_MAX:
        raise ValueError(f"Rounds must be between {ROUND_MIN} and {ROUND_MAX}")
    return rounds


def validate_auto_check_delay(value) -> int:
    if value in (None, ""):
        return DEFAULT_AUTO_CHECK_DELAY
    delay = int(value)
    if delay not in AUTO_CHECK_DELAY_OPTIONS:
        raise ValueError(
            f"Invalid auto-check delay: {delay}ms. Must be one of: "
            f"{', '.join(str(d) for d in AUTO_CHECK_DELAY_OPTIONS)}"
        )
    return delay


def create_validated_settings(
    custom_topic: str = "",
    preset_topic: str = "",
    length: str = "medium",
    custom_word_count: Optional[float] = None,
    rounds: Optional[float] = DEFAULT_ROUNDS,
) -> SessionSettings:
    """Create validated SessionSettings from setup screen inputs.

    Raises:
        ValueError: If any input fails validation
    """
    length = validate_length(length)
    return SessionSettings(
        topic=validate_topic(custom_topic, preset_topic),
        length=length,
        custom_word_count=validate_custom_word_count(length, custom_word_count),
        rounds=validate_rounds(rounds),
    )
