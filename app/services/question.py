# app/services/question.py
import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.decorator import GuardViolation, NotFoundError, db_exception
from app.models.exam_test import TestSection
from app.models.question import Question
from app.schemas.question import ClassLevel, QuestionCreate, Subject

logger = logging.getLogger(__name__)


class QuestionService:
    def __init__(self, db: Session):
        self.db = db

    @db_exception
    def create_question(self, question_in: QuestionCreate) -> Question:
        question = Question(
            subject=question_in.subject.value,
            class_level=question_in.class_level.value,
            question_text=question_in.question_text,
            question_image=question_in.question_image,
            options=[o.model_dump(exclude_none=True) for o in question_in.options],
            correct_answer_index=question_in.correct_answer_index,
            explanation=question_in.explanation,
        )
        self.db.add(question)
        self.db.commit()
        self.db.refresh(question)

        logger.info(f"Question {question.id} created ({question.subject})")
        return question

    def get_question(self, question_id: int) -> Question:
        question = self.db.query(Question).filter(Question.id == question_id).first()
        if not question:
            raise NotFoundError("Question not found", "question_not_found")
        return question

    def list_questions(
        self,
        subject: Optional[Subject] = None,
        class_level: Optional[ClassLevel] = None,
        page: int = 1,
        size: int = 20,
    ) -> Tuple[List[Question], dict]:
        query = self.db.query(Question)
        if subject:
            query = query.filter(Question.subject == subject.value)
        if class_level:
            query = query.filter(Question.class_level == class_level.value)

        total = query.count()
        offset = (page - 1) * size
        questions = query.order_by(Question.id).offset(offset).limit(size).all()

        pagination = {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": math.ceil(total / size) if size > 0 else 0,
        }
        return questions, pagination

    def get_by_ids(self, question_ids: Iterable[int]) -> Dict[int, Question]:
        ids = list(question_ids)
        if not ids:
            return {}
        questions = self.db.query(Question).filter(Question.id.in_(ids)).all()
        return {q.id: q for q in questions}

    def ensure_exist(self, question_ids: Iterable[int]) -> None:
        ids = list(question_ids)
        found = self.get_by_ids(ids)
        missing = [qid for qid in ids if qid not in found]
        if missing:
            raise NotFoundError(
                f"Unknown question ids: {', '.join(str(m) for m in missing)}",
                "question_not_found",
            )

    def count_questions(
        self, subject: Optional[Subject] = None, class_level: Optional[ClassLevel] = None
    ) -> int:
        query = self.db.query(Question)
        if subject:
            query = query.filter(Question.subject == subject.value)
        if class_level:
            query = query.filter(Question.class_level == class_level.value)
        return query.count()

    @db_exception
    def delete_question(self, question_id: int) -> None:
        """Remove a question from the bank. Refused while any test section lists it."""
        question = self.get_question(question_id)

        using = [
            section.test_id
            for section in self.db.query(TestSection).all()
            if question_id in (section.question_ids or [])
        ]
        if using:
            raise GuardViolation(
                f"Question is used by test(s) {', '.join(str(t) for t in sorted(set(using)))}",
                "question_in_use",
            )

        self.db.delete(question)
        self.db.commit()
        logger.info(f"Question {question_id} deleted")
