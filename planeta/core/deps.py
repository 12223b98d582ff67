import secrets
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from planeta.core.config import settings
from planeta.core.exceptions import Unauthorized


bearer_scheme = HTTPBearer(auto_error=False)


def _token_matches(credentials: Optional[HTTPAuthorizationCredentials]) -> bool:
    if not settings.ADMIN_TOKEN or credentials is None:
        return False
    return secrets.compare_digest(credentials.credentials, settings.ADMIN_TOKEN)


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    """管理员接口：校验 Bearer 令牌 (未配置 ADMIN_TOKEN 时一律拒绝)"""
    if not _token_matches(credentials):
        raise Unauthorized()


def require_moderator(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    """审核接口：仅在 MODERATION_TOKEN_REQUIRED 开启时校验令牌"""
    if settings.MODERATION_TOKEN_REQUIRED and not _token_matches(credentials):
        raise Unauthorized()
