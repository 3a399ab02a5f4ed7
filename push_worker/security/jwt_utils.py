# push_worker/security/jwt_utils.py
import os
import jwt
from fastapi import Header, HTTPException, status

JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production-0123456789")
JWT_ALG = os.getenv("JWT_ALG", "HS256")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_token(token: str) -> dict:
    """
    Decodifica y valida el JWT de una vista (WebSocket o REST).
    Lanza 401 si es inválido o no trae sub.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
    except jwt.PyJWTError:
        raise _unauthorized("Invalid token")

    if "sub" not in payload:
        raise _unauthorized("Token without subject")

    return payload


def get_current_user(authorization: str = Header(default="")) -> dict:
    """
    Dependencia de FastAPI: toma Authorization: Bearer <token>,
    lo valida y devuelve el payload.
    """
    if not authorization:
        raise _unauthorized("Missing Authorization header")

    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid Authorization header format")

    return decode_token(authorization.removeprefix("Bearer ").strip())
