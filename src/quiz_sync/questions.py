# Area: Shared
"""
quiz_sync.questions — Question bank
===================================

Every client must use the same ordered bank: round r always shows
question r, and the correct index decides which locked scores count.

A bank can be loaded from JSON:

    [
      {"text": "Which consensus engine ...?",
       "options": ["A", "B", "C", "D"],
       "correct": 0}
    ]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from .types import Question


DEFAULT_QUESTIONS: List[Question] = [
    Question(
        text="WHAT IS THE MAXIMUM GAS BUDGET FOR A SUI TRANSACTION?",
        options=("1000 SUI", "50,000 MIST", "10,000,000,000 MIST", "UNLIMITED"),
        correct=2,
    ),
    Question(
        text="WHICH CONSENSUS ENGINE DOES SUI USE?",
        options=("NARWHAL & BULLSHARK", "PROOF OF WORK", "TENDERMINT", "PROOF OF HISTORY"),
        correct=0,
    ),
    Question(
        text="WHAT IS THE NATIVE LANGUAGE FOR SUI SMART CONTRACTS?",
        options=("SOLIDITY", "RUST", "MOVE", "TYPESCRIPT"),
        correct=2,
    ),
]


class _QuestionRecord(BaseModel):
    text: str = Field(min_length=1)
    options: List[str] = Field(min_length=2)
    correct: int = Field(ge=0)

    @model_validator(mode="after")
    def _correct_in_range(self) -> "_QuestionRecord":
        if self.correct >= len(self.options):
            raise ValueError(f"correct index {self.correct} out of range for {len(self.options)} options")
        return self


def load_questions(path: Union[str, Path]) -> List[Question]:
    """
    Load a question bank from a JSON file.

    Raises:
        ValueError: If the file is not a non-empty list of valid questions
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list) or not data:
        raise ValueError(f"{path}: expected a non-empty JSON list of questions")

    questions = []
    for i, item in enumerate(data):
        try:
            record = _QuestionRecord.model_validate(item)
        except ValidationError as e:
            raise ValueError(f"{path}: question {i} is invalid: {e}") from None
        questions.append(Question(record.text, tuple(record.options), record.correct))
    return questions
