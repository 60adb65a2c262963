"""
Account use cases: registration, login and question-package purchases.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from sulama.core.errors import ConflictError, InvalidCredentialsError, NotFoundError, ValidationError
from sulama.core.security import hash_password, is_hashed, verify_password
from sulama.repositories import json_storage

logger = logging.getLogger(__name__)

REGISTER_LIMIT = 20
PACKAGES = {
    "mini": 50,
    "pro": 200,
    "bayi": 1000,
}


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


@dataclass
class AuthService:
    """Handles registration, login and package purchases against the users file."""

    register_limit: int = REGISTER_LIMIT

    # -------------------------------------- kayıt --------------------------------------
    def register(self, email: str, password: str) -> dict:
        email = _clean(email)
        if not email or not password:
            raise ValidationError("email ve password zorunlu.")
        users = json_storage.load_users()
        if json_storage.find_user(users, email):
            raise ConflictError("Bu e-posta ile kullanıcı zaten var.")
        user = json_storage.new_user(email, hash_password(str(password)), self.register_limit)
        users.append(user)
        json_storage.save_users(users)
        logger.info("Yeni kullanıcı: %s", email)
        return json_storage.user_summary(user)

    # -------------------------------------- giriş --------------------------------------
    def login(self, email: str, password: str) -> dict:
        email = _clean(email)
        if not email or not password:
            raise ValidationError("email ve password zorunlu.")
        users = json_storage.load_users()
        user = json_storage.find_user(users, email)
        if not user or not verify_password(str(password), user.get("password")):
            raise InvalidCredentialsError("E-posta veya şifre hatalı.")
        if not is_hashed(user.get("password")):
            user["password"] = hash_password(str(password))
            json_storage.save_users(users)
        return json_storage.user_summary(user)

    # -------------------------------------- paketler --------------------------------------
    def purchase(self, email: str, package_type: str) -> dict:
        email = _clean(email)
        package_type = _clean(package_type)
        if not email or not package_type:
            raise ValidationError("email ve packageType zorunlu.")
        users = json_storage.load_users()
        user = json_storage.find_user(users, email)
        if not user:
            raise NotFoundError("Kullanıcı bulunamadı.")
        add = PACKAGES.get(package_type)
        if add is None:
            raise ValidationError("Geçersiz paket tipi.")
        user["limit"] = int(user.get("limit") or 0) + add
        json_storage.save_users(users)
        logger.info("Paket satın alındı: %s %s (+%d)", email, package_type, add)
        return json_storage.user_summary(user)
