from .miners import router as miners_router
from .user import router as user_router
