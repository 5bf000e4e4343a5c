from .miner import (MinerCreate, MinerResponse, MinerRegisteredResponse, MinerPage,
                    TOTPCodeResponse, TOTPValidateRequest, TOTPValidateResponse)
from .user import UserRegisterRequest, UserResponse
