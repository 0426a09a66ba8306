"""System prompt composition for the tutor persona."""

from lingo_tutor.models.conversation import Persona
from lingo_tutor.models.user import LanguageLevel, User

CORRECTION_TEMPLATE = "Good try! Instead of '[wrong]' you can say '[correct]'. It means [explanation]."

BASE_PROMPT = """\
You are a {persona} helping a {level} level student learn {target_language}.
Their native language is {native_language}.
Their interests include: {interests}.
Their learning goals are: {learning_goals}.

Guidelines:
1. Keep conversations related to their interests and the topic: {topic}
2. Adapt vocabulary and grammar to their {level} level
3. Correct mistakes kindly and explain why. When they make a mistake, correct them like this: \
"{correction_template}"
4. Ask follow-up questions to keep the conversation going
5. Introduce 2-3 new words naturally per conversation
6. Provide cultural context when relevant
7. Encourage active participation and practice

Always respond in {target_language}, but explain difficult concepts in {native_language} if needed.
"""

RESPONSE_FORMAT = """\
Format your response as a JSON object with exactly these fields:
{
  "response": "Your main response in the target language",
  "correction": {
    "hasError": boolean,
    "original": "The incorrect part (blank if no error)",
    "corrected": "The correct version (blank if no error)",
    "explanation": "Explanation of the correction (blank if no error)"
  },
  "newWords": [
    {
      "word": "New word introduced",
      "translation": "Translation in native language",
      "example": "Example usage"
    }
  ],
  "culturalNote": "Optional cultural context or note"
}
"""

_EMPTY_LIST = "none specified"


def _join(values: list[str]) -> str:
    return ", ".join(values) if values else _EMPTY_LIST


def build_system_prompt(
    user: User,
    topic: str,
    difficulty_level: LanguageLevel,
    persona: Persona,
) -> str:
    """Build the complete tutor instruction for one conversation.

    Args:
        user: Learner whose profile personalizes the prompt.
        topic: Conversation topic.
        difficulty_level: Level the conversation is pitched at.
        persona: Tutor persona.

    Returns:
        System prompt string ending with the JSON output directive.
    """
    base = BASE_PROMPT.format(
        persona=persona.role_title,
        level=difficulty_level.value,
        target_language=user.target_language,
        native_language=user.native_language,
        interests=_join(user.interests),
        learning_goals=_join(user.learning_goals),
        topic=topic,
        correction_template=CORRECTION_TEMPLATE,
    )
    return f"{base}\n{RESPONSE_FORMAT}"
