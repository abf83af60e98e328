# storefront/services/auth.py

import hmac
from typing import Optional

from fastapi import Header, Request

from storefront.exceptions import Unauthorized
from storefront.utils.security import verify_password


class AdminGate:
    """
    Проверка пароля администратора на стороне сервера.
    Секрет: ADMIN_PASSWORD (сравнение за постоянное время)
    или ADMIN_PASSWORD_HASH (passlib). Клиенту секрет не отдаётся.
    """

    def __init__(self, password: Optional[str] = None, password_hash: Optional[str] = None):
        self.password = password or None
        self.password_hash = password_hash or None

    @property
    def configured(self) -> bool:
        return bool(self.password or self.password_hash)

    def verify(self, password: Optional[str]) -> bool:
        if not password or not isinstance(password, str):
            return False
        if self.password:
            return hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        if self.password_hash:
            return verify_password(password, self.password_hash)
        return False


async def require_admin(
    request: Request,
    x_admin_password: Optional[str] = Header(default=None),
) -> bool:
    """
    Зависимость для админских маршрутов: заголовок x-admin-password
    должен совпасть с секретом сервера, иначе 401.
    """
    gate: AdminGate = request.app.state.admin_gate
    log = request.app.state.log

    if not gate.configured:
        await log.log_error("auth", "Пароль администратора не задан (ADMIN_PASSWORD / ADMIN_PASSWORD_HASH)")
        raise Unauthorized()

    if not gate.verify(x_admin_password):
        await log.log_warning("auth", "Неудачная попытка входа администратора",
                              {"path": request.url.path})
        raise Unauthorized()

    return True
