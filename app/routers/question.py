from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import get_current_admin
from app.models.user import User
from app.schemas.question import (
    ClassLevel,
    QuestionCountResponse,
    QuestionCreate,
    QuestionListResponse,
    QuestionResponse,
    Subject,
)
from app.services.question import QuestionService

router = APIRouter(prefix="/questions", tags=["questions"])


@router.post(
    "/", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED
)
async def create_question(
    question_in: QuestionCreate,
    admin: Annotated[User, Depends(get_current_admin)],
    db: Session = Depends(get_db),
):
    """Add a question to the bank - ADMIN ONLY"""
    return QuestionService(db).create_question(question_in)


@router.get("/", response_model=QuestionListResponse)
async def list_questions(
    admin: Annotated[User, Depends(get_current_admin)],
    subject: Optional[Subject] = None,
    class_level: Optional[ClassLevel] = None,
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
):
    questions, pagination = QuestionService(db).list_questions(
        subject=subject, class_level=class_level, page=page, size=size
    )
    return QuestionListResponse(
        questions=[QuestionResponse.model_validate(q) for q in questions],
        **pagination,
    )


@router.get("/count", response_model=QuestionCountResponse)
async def count_questions(
    admin: Annotated[User, Depends(get_current_admin)],
    subject: Optional[Subject] = None,
    class_level: Optional[ClassLevel] = None,
    db: Session = Depends(get_db),
):
    """Number of questions in the bank, optionally filtered"""
    total = QuestionService(db).count_questions(subject=subject, class_level=class_level)
    return QuestionCountResponse(total=total)


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: int,
    admin: Annotated[User, Depends(get_current_admin)],
    db: Session = Depends(get_db),
):
    return QuestionService(db).get_question(question_id)


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: int,
    admin: Annotated[User, Depends(get_current_admin)],
    db: Session = Depends(get_db),
):
    """
    Delete a question - ADMIN ONLY.
    Refused with 409 while any test still uses it.
    """
    QuestionService(db).delete_question(question_id)
    return None
