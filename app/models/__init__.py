from .user import User
from .miner import Miner
