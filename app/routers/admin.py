from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_admin
from app.models.user import User
from app.schemas.auth import AdminRegistrationRequest, RoleUpdate, UserResponse
from app.services.admin import AdminServices

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={404: {"description": "Not found"}},
)

admin_service = AdminServices()


@router.post(
    "/register",
    response_model=UserResponse,
    description="Create a new admin account (requires admin access)",
    status_code=201,
)
async def register_admin(
    admin_data: AdminRegistrationRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Create an account with the admin role. The new admin logs in through /auth/login.
    """
    return admin_service.register_admin(admin_data, current_admin, db)


@router.patch(
    "/users/{user_id}/role",
    response_model=UserResponse,
    description="Assign a role to a user (requires admin access)",
)
async def assign_user_role(
    user_id: int,
    role_data: RoleUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Promote a student to admin or demote an admin to student.
    An admin cannot demote themselves.
    """
    return admin_service.assign_role(user_id, role_data.role, current_admin, db)
