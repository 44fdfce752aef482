from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.auth.schemas import LoginRequest, LoginResponse
from app.api.auth.service import AuthService
from app.database.database import get_db

router = APIRouter(prefix="/request-token", tags=["auth"])


@router.post("", response_model=LoginResponse)
def request_token(data: LoginRequest, db: Session = Depends(get_db)):
    service = AuthService(db)
    response = service.authenticate_user(data.username, data.password)

    if not response:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return response
