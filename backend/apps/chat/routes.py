"""Chat routes - registers all chat endpoints."""

from fastapi import APIRouter

from apps.chat.handlers import send_message

router = APIRouter(prefix="/chat", tags=["Chat"])

# POST /chat - Answer a question
router.post("")(send_message)
