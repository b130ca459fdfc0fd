# app/schemas/question.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Subject(str, Enum):
    maths = "maths"
    chemistry = "chemistry"
    physics = "physics"


class ClassLevel(str, Enum):
    class11th = "class11th"
    class12th = "class12th"


class QuestionOption(BaseModel):
    text: Optional[str] = None
    image: Optional[str] = Field(None, description="Opaque image reference")

    @model_validator(mode="after")
    def require_content(self):
        if not self.text and not self.image:
            raise ValueError("An option needs text or an image")
        return self


class QuestionCreate(BaseModel):
    """Schema for creating a question - ADMIN ONLY"""

    subject: Subject
    class_level: ClassLevel
    question_text: Optional[str] = None
    question_image: Optional[str] = None
    options: List[QuestionOption] = Field(..., min_length=2)
    correct_answer_index: int = Field(
        ..., ge=0, description="Index of the correct answer in options array"
    )
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def check_question(self):
        if not self.question_text and not self.question_image:
            raise ValueError("A question needs text or an image")
        if self.correct_answer_index >= len(self.options):
            raise ValueError(
                f"correct_answer_index {self.correct_answer_index} is out of range "
                f"for {len(self.options)} options"
            )
        return self


class QuestionForAttempt(BaseModel):
    """Question shown during an attempt - WITHOUT correct answer"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    subject: Subject
    class_level: ClassLevel
    question_text: Optional[str] = None
    question_image: Optional[str] = None
    options: List[QuestionOption]


class QuestionResponse(QuestionForAttempt):
    """Full question - ADMIN ONLY (includes correct answer)"""

    correct_answer_index: int
    explanation: Optional[str] = None
    created_at: datetime


class QuestionListResponse(BaseModel):
    questions: List[QuestionResponse]
    total: int
    page: int
    size: int
    total_pages: int


class QuestionCountResponse(BaseModel):
    total: int
