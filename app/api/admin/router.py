from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.api.auth.dependencies import require_admin
from app.api.users.models import User

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("", response_class=PlainTextResponse)
def get_admin_page(admin: User = Depends(require_admin)):
    return "Admin page"
