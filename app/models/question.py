# app/models/question.py
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from app.core.database import Base, JSONType


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)

    # Classification
    subject = Column(String(20), nullable=False, index=True)  # maths, chemistry, physics
    class_level = Column(
        String(20), nullable=False, index=True
    )  # class11th, class12th

    # Content (text and/or an opaque image reference)
    question_text = Column(Text, nullable=True)
    question_image = Column(Text, nullable=True)

    # Options: [{"text": "...", "image": "..."}, ...]
    options = Column(JSONType, nullable=False)
    correct_answer_index = Column(Integer, nullable=False)  # zero-based
    explanation = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<Question(id={self.id}, subject='{self.subject}')>"
