from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.test_attempt import TestAttemptListResponse
from app.services.test_attempt import TestAttemptService, serialize_attempt

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/attempts", response_model=TestAttemptListResponse)
async def list_my_attempts(
    current_user: Annotated[User, Depends(get_current_user)],
    test_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """Attempt history of the current user, newest first"""
    attempts = TestAttemptService(db).list_user_attempts(current_user, test_id)
    return {
        "attempts": [serialize_attempt(a) for a in attempts],
        "total": len(attempts),
    }
