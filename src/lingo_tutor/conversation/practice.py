"""Pronunciation analysis and grammar exercise generation."""

import structlog
from openai import AsyncOpenAI

from lingo_tutor.conversation.llm import complete_json, parse_reply
from lingo_tutor.models.tutor import GrammarExercise, PronunciationAnalysis
from lingo_tutor.models.user import LanguageLevel, User

logger = structlog.get_logger()

PRONUNCIATION_PROMPT = """\
You are a pronunciation expert. Analyze the following text as if it was spoken by a \
language learner and provide detailed feedback.
Target language: {target_language}

Format your response as JSON with the following structure:
{{
  "score": number (0-100),
  "feedback": {{
    "strengths": ["List of pronunciation strengths"],
    "areasForImprovement": ["List of areas that need work"],
    "specificFeedback": ["Detailed feedback on specific sounds or patterns"]
  }},
  "suggestions": ["Practical suggestions for improvement"]
}}
"""

EXERCISE_PROMPT = """\
Create a grammar exercise for a {level} level student learning {target_language}.
Their native language is {native_language}.
Topic: {topic}

Format your response as JSON with the following structure:
{{
  "exercise": {{
    "type": "fill-in-blank" | "multiple-choice" | "sentence-correction",
    "instructions": "Clear instructions in target language",
    "questions": [
      {{
        "question": "The question or sentence",
        "options": ["Option 1", "Option 2"] (for multiple choice),
        "correctAnswer": "The correct answer",
        "explanation": "Explanation of the grammar rule"
      }}
    ]
  }},
  "grammarPoint": {{
    "name": "Name of the grammar point",
    "explanation": "Detailed explanation in native language",
    "examples": ["Example 1", "Example 2"]
  }}
}}
"""


class PracticeGenerator:
    """Generates stand-alone practice material outside the conversation log.

    Args:
        api_key: OpenAI API key.
        model: Chat model name.
    """

    def __init__(self, api_key: str, model: str = "gpt-4"):
        self.client = AsyncOpenAI(api_key=api_key, max_retries=0)
        self.model = model

    async def analyze_pronunciation(self, text: str, target_language: str) -> PronunciationAnalysis:
        data = await complete_json(
            self.client,
            model=self.model,
            messages=[
                {
                    "role": "system",
                    "content": PRONUNCIATION_PROMPT.format(target_language=target_language),
                },
                {"role": "user", "content": text},
            ],
            temperature=0.3,
            max_tokens=300,
        )
        analysis = parse_reply(data, PronunciationAnalysis)
        logger.info("pronunciation_analyzed", score=analysis.score)
        return analysis

    async def grammar_exercise(
        self,
        user: User,
        topic: str,
        difficulty_level: LanguageLevel,
    ) -> GrammarExercise:
        prompt = EXERCISE_PROMPT.format(
            level=difficulty_level.value,
            target_language=user.target_language,
            native_language=user.native_language,
            topic=topic,
        )
        data = await complete_json(
            self.client,
            model=self.model,
            messages=[{"role": "system", "content": prompt}],
            temperature=0.7,
            max_tokens=500,
        )
        exercise = parse_reply(data, GrammarExercise)
        logger.info(
            "grammar_exercise_generated",
            exercise_type=exercise.exercise.type,
            questions=len(exercise.exercise.questions),
        )
        return exercise

    async def close(self) -> None:
        await self.client.close()
