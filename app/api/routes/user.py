from fastapi import APIRouter, HTTPException, status

from app.core.exceptions import UserAlreadyExistsError
from app.schemas.user import UserRegisterRequest, UserResponse
from app.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(payload: UserRegisterRequest):
    """
    Регистрирует нового пользователя по номеру телефона.

    Returns:
        UserResponse: id, номер телефона, статус верификации, дата создания.

    Raises:
        HTTPException: 400, если номер телефона уже зарегистрирован.
    """
    try:
        return await UserService.register_user(payload)
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
