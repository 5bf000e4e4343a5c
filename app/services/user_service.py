from loguru import logger
from tortoise.exceptions import IntegrityError

from app.core.exceptions import UserAlreadyExistsError
from app.core.security.security import get_password_hash
from app.models.user import User
from app.schemas.user import UserRegisterRequest


class UserService:
    @staticmethod
    async def register_user(payload: UserRegisterRequest) -> User:
        """
        Регистрирует нового пользователя.

        - Проверяет, что номер телефона ещё не используется.
        - Хэширует пароль (если вход не через внешний провайдер).
        - Создаёт пользователя.
        """
        if await User.exists(phone_number=payload.phone_number):
            raise UserAlreadyExistsError()

        password_hash = ""
        if not payload.firebase_uid:
            password_hash = get_password_hash(payload.password)

        try:
            user = await User.create(
                phone_number=payload.phone_number,
                password_hash=password_hash,
                firebase_uid=payload.firebase_uid,
                is_verified=payload.is_verified,
            )
        except IntegrityError as e:
            # гонка двух регистраций или повторный firebase_uid
            logger.warning(f"Integrity error registering user {payload.phone_number}: {e}")
            raise UserAlreadyExistsError() from e

        logger.info(f"User {user.id} registered")
        return user
