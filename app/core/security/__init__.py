from .security import PasswordHasher, verify_password, get_password_hash
