from .repository import MinerRepository
from .miner_service import MinerService, ProvisioningResult
