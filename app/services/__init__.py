from .user_service import UserService
from .miners import MinerService, MinerRepository, ProvisioningResult
