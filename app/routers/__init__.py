from .admin import router as admin_router
from .auth import router as auth_router
from .exam_test import router as exam_test_router
from .question import router as question_router
from .test_attempt import router as test_attempt_router
from .user import router as user_router

routes = [
    auth_router,
    user_router,
    admin_router,
    question_router,
    exam_test_router,
    test_attempt_router,
]
