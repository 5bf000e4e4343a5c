from .totp_service import TOTPService
