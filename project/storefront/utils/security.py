# storefront/utils/security.py

"""
Хэширование пароля администратора.
Используется passlib с sha256_crypt, чтобы избежать проблем с bcrypt на Windows.
Хэш кладётся в ADMIN_PASSWORD_HASH вместо открытого ADMIN_PASSWORD:

    python -m storefront.utils.security 'пароль'
"""

import sys

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

pwd_context = CryptContext(schemes=["sha256_crypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Проверяет совпадение пароля с его хэшем.
    Хэш неизвестного формата считается несовпадением.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError):
        return False


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python -m storefront.utils.security <password>")
        sys.exit(1)
    print(hash_password(sys.argv[1]))
