from fastapi import APIRouter
from .users import router as users_router
from .friendship_requests import router as friendship_requests_router

router = APIRouter()
router.include_router(users_router, prefix='/users', tags=['users'])
router.include_router(friendship_requests_router, prefix='/friendship-requests', tags=['friendship-requests'])
