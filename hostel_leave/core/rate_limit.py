from slowapi import Limiter
from slowapi.util import get_remote_address

from hostel_leave.core.config import settings

limiter = Limiter(key_func=get_remote_address)


def login_rate_limit() -> str:
    return settings.LOGIN_RATE_LIMIT
