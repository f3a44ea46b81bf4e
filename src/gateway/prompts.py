"""
Prompts for the StudySpark generation tasks.

Every structured task asks for bare JSON; responses are still sanitized and
schema-checked because models wrap JSON in code fences anyway.
"""
from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

# =============================================================================
# Quiz Generation
# =============================================================================

QUIZ_PROMPT = """You are an expert educational assistant named StudySpark. Your task is to create a high-quality, {count}-question multiple-choice quiz from the user's notes provided below.

**Instructions:**
1. Carefully read and understand the entire text of the notes.
2. For each question you generate, identify the main sub-topic it relates to from the notes.
3. The questions must be based ONLY on the information present in the provided notes.
4. Every question has exactly four options keyed "A", "B", "C" and "D", and exactly one correct answer.
5. Return ONLY valid JSON (no extra text or markdown).

**JSON Format:**
{{
  "questions": [
    {{
      "topic": "The specific sub-topic from the notes",
      "question": "The question text",
      "options": {{ "A": "Option A", "B": "Option B", "C": "Option C", "D": "Option D" }},
      "correct_answer": "C",
      "explanation": "A brief explanation of why the answer is correct, based on the notes."
    }}
  ]
}}

**User's Notes:**
---
{notes}
---
"""

# =============================================================================
# Summary
# =============================================================================

SUMMARY_PROMPT = """You are StudySpark, a smart educational assistant.
Please provide a **clear, structured summary** of the following notes/text.
- Keep it concise but comprehensive.
- Use bullet points or short paragraphs for readability.
- Highlight key concepts, definitions, and important facts.

**Text:**
---
{text}
---
"""

# =============================================================================
# Topic Extraction
# =============================================================================

TOPICS_PROMPT = """You are StudySpark, an educational assistant.
Extract and return a **list of all main topics and sub-topics** from the text below.
- Return ONLY valid JSON with this format:
  {{ "topics": ["Topic 1", "Topic 2", "Topic 3"] }}

**Text:**
---
{text}
---
"""

# =============================================================================
# Quiz Feedback
# =============================================================================

FEEDBACK_PROMPT = """You are StudySpark. Compare the user's answers with the correct answers.
A question index missing from UserAnswers was not answered and is incorrect.
Return ONLY JSON:
{{
  "feedback": [
    {{
      "topic": "...",
      "question": "...",
      "user_answer": "...",
      "correct_answer": "...",
      "is_correct": true,
      "explanation": "2-3 sentence explanation"
    }}
  ],
  "score": {{
    "correct": 0,
    "total": 0,
    "percentage": 0.0,
    "summary": "Overall performance summary..."
  }}
}}
Questions:
{questions}
UserAnswers:
{answers}
"""

# =============================================================================
# Chat
# =============================================================================

CHAT_PROMPT = """{system_instruction}

User: {message}
"""


def quiz_prompt(notes: str, count: int) -> str:
    return QUIZ_PROMPT.format(notes=notes, count=count)


def summary_prompt(text: str) -> str:
    return SUMMARY_PROMPT.format(text=text)


def topics_prompt(text: str) -> str:
    return TOPICS_PROMPT.format(text=text)


def feedback_prompt(questions: Sequence[Mapping], answers: Mapping[int, str]) -> str:
    """Serialize the question set and answers (JSON object keys are indices as strings)."""
    return FEEDBACK_PROMPT.format(
        questions=json.dumps(list(questions), indent=2, ensure_ascii=False),
        answers=json.dumps({str(k): v for k, v in sorted(answers.items())}, indent=2),
    )


def chat_prompt(message: str, system_instruction: str) -> str:
    return CHAT_PROMPT.format(system_instruction=system_instruction, message=message)
