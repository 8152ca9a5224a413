# 인증 자체는 외부 auth 서비스 담당. 여기서는 bearer JWT만 검증해서 user id를 뽑는다.
import logging
import uuid
from dataclasses import dataclass

import jwt
from fastapi import Request

from sehat.core.config import settings
from sehat.core.errors import NotAuthenticated

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserContext:
    """요청 단위 identity. 모든 crud 호출에 명시적으로 넘긴다."""

    user_id: uuid.UUID


def _get_bearer_token(request: Request) -> str | None:
    h = request.headers.get("Authorization", "")
    if h.startswith("Bearer "):
        return h.split(" ", 1)[1].strip() or None
    return None


def decode_token(token: str) -> UserContext:
    options = {"require": ["sub", "exp"]}
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
            options=options if settings.AUTH_JWT_AUDIENCE else {**options, "verify_aud": False},
        )
    except jwt.PyJWTError as e:
        logger.info("rejected bearer token: %s", e)
        raise NotAuthenticated()

    try:
        return UserContext(user_id=uuid.UUID(str(payload["sub"])))
    except ValueError:
        logger.info("bearer token sub is not a uuid")
        raise NotAuthenticated()


def get_current_user(request: Request) -> UserContext:
    token = _get_bearer_token(request)
    if not token:
        raise NotAuthenticated()
    return decode_token(token)
