import base64
import io
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlencode

import pyotp
import qrcode

from app.core.exceptions import InvalidOrExpiredCodeError

TOTP_DIGITS = 6
TOTP_PERIOD = 30  # секунд
SECRET_LENGTH = 32  # base32-символов = 160 бит


class TOTPService:
    """RFC 6238 TOTP: SHA-1, 6 цифр, шаг 30 секунд"""

    # ===================== utils =====================

    @staticmethod
    def _normalize_code(code: str) -> str:
        """
        Приводим код к единому виду:
        - убираем пробелы по краям
        - убираем пробелы внутри
        """
        return code.strip().replace(" ", "")

    @staticmethod
    def _timestamp(now: Optional[datetime]) -> int:
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return int(now.timestamp())

    @staticmethod
    def _totp(secret: str) -> pyotp.TOTP:
        return pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_PERIOD)

    # ===================== codec =====================

    @staticmethod
    def generate_secret(issuer: str, account: str) -> tuple[str, str]:
        """Generate a new TOTP secret and its otpauth:// provisioning URL"""
        secret = pyotp.random_base32(length=SECRET_LENGTH)
        uri = TOTPService._totp(secret).provisioning_uri(name=account, issuer_name=issuer)
        # pyotp опускает значения по умолчанию, в URL они нужны явно
        params = urlencode({"algorithm": "SHA1", "digits": TOTP_DIGITS, "period": TOTP_PERIOD})
        return secret, f"{uri}&{params}"

    @staticmethod
    def current_code(secret: str, now: Optional[datetime] = None) -> str:
        """Current 6-digit code for the 30-second step containing `now`"""
        return TOTPService._totp(secret).at(TOTPService._timestamp(now))

    @staticmethod
    def validate_code(secret: str, code: str, now: Optional[datetime] = None, skew: int = 1) -> None:
        """
        Проверяет код для текущего шага и ±skew соседних шагов.

        Raises:
            InvalidOrExpiredCodeError: код не подошёл ни к одному шагу окна
        """
        norm = TOTPService._normalize_code(code)
        if not norm.isdigit() or len(norm) != TOTP_DIGITS:
            raise InvalidOrExpiredCodeError()

        # valid_window=1 → +/- одно 30-секундное окно
        if not TOTPService._totp(secret).verify(norm, for_time=TOTPService._timestamp(now), valid_window=skew):
            raise InvalidOrExpiredCodeError()

    @staticmethod
    def qr_code_data_url(provisioning_url: str) -> str:
        """Generate QR code as base64 data URL"""
        qr = qrcode.QRCode(version=1, box_size=10, border=5)
        qr.add_data(provisioning_url)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        buffer.seek(0)

        img_base64 = base64.b64encode(buffer.getvalue()).decode()
        return f"data:image/png;base64,{img_base64}"
