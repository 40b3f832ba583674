"""Topic table: dropdown keys mapped to the topic string sent in the prompt."""

from typing import Dict, List, Tuple

CUSTOM_TOPIC = "custom"

TOPICS: Dict[str, str] = {
    "business": "business",
    "clothes": "clothes",
    "common_conversation": "common conversation",
    "computers": "computers",
    "food_and_drink": "food and drink",
    "games": "games",
    "grammar_conjunctions": 'beginner phrases using conjunctions like "and," "or," "but," and "so"',
    "grammar_farewells": "beginner phrases for farewells and goodbyes",
    "grammar_introductions": "beginner phrases for self-introductions",
    "grammar_pronouns": 'beginner phrases using pronouns like "I," "you," "he," "she," and "they"',
    "grammar_quantitative": 'beginner phrases using quantitative words like "some," "all," "none," "many," and "few"',
    "grammar_wh": 'beginner phrases using "who," "what," "when," "where," and "why"',
    "school": "school",
    "science": "science",
    "shopping": "shopping",
    "sports": "sports",
    "technology": "technology",
}

TOPIC_LABELS: Dict[str, str] = {
    "business": "Business",
    "clothes": "Clothes",
    "common_conversation": "Common Conversation",
    "computers": "Computers",
    "food_and_drink": "Food & Drink",
    "games": "Games",
    "grammar_conjunctions": "Grammar: Conjunctions",
    "grammar_farewells": "Grammar: Farewells",
    "grammar_introductions": "Grammar: Introductions",
    "grammar_pronouns": "Grammar: Pronouns",
    "grammar_quantitative": "Grammar: Quantitative Words",
    "grammar_wh": "Grammar: Wh- Questions",
    "school": "School",
    "science": "Science",
    "shopping": "Shopping",
    "sports": "Sports",
    "technology": "Technology",
    CUSTOM_TOPIC: "Custom...",
}


def resolve_topic(key: str, custom_text: str = "") -> str:
    """
    Turn a dropdown selection into the topic string used in the prompt.

    Args:
        key: Topic key from TOPICS, or CUSTOM_TOPIC
        custom_text: Free text used when key is CUSTOM_TOPIC

    Returns:
        The topic string. Unknown keys are passed through unchanged.

    Raises:
        ValueError: If the custom topic is selected but left blank
    """
    if key == CUSTOM_TOPIC:
        topic = (custom_text or "").strip()
        if not topic:
            raise ValueError("Please enter a custom topic.")
        return topic
    return TOPICS.get(key, key)


def get_topic_options() -> List[Tuple[str, str]]:
    """(key, label) pairs for the topic dropdown, custom entry last."""
    return [(key, TOPIC_LABELS.get(key, key)) for key in list(TOPICS) + [CUSTOM_TOPIC]]
