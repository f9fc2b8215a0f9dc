import uuid
import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel
from clinicslots.core.config import settings

log = logging.getLogger(__name__)

http_bearer = HTTPBearer(auto_error=False)

class Principal(BaseModel):
    """A staff member acting inside exactly one clinic."""
    user_id: uuid.UUID
    clinic_id: uuid.UUID
    roles: list[str] = []
    scopes: list[str] = []

    def allows(self, scope: str) -> bool:
        # "*" grants everything, "bookings:*" grants every bookings scope
        area = scope.split(":", 1)[0]
        return "*" in self.scopes or scope in self.scopes or f"{area}:*" in self.scopes

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail, headers={"WWW-Authenticate": "Bearer"})

def _claims(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG], audience=settings.REQUIRED_AUDIENCE)
    except JWTError as e:
        raise _unauthorized(f"Invalid token: {e}")

def _scopes(claims: dict) -> list[str]:
    # accept both a list claim and the OAuth space-separated "scope" string
    scopes = claims.get("scopes")
    if scopes is None:
        scopes = (claims.get("scope") or "").split()
    return list(scopes)

def local_principal() -> Principal:
    return Principal(user_id=uuid.UUID(int=0), clinic_id=uuid.UUID(settings.DEFAULT_CLINIC_ID), roles=["admin"], scopes=["*"])

async def get_principal(creds: HTTPAuthorizationCredentials | None = Depends(http_bearer)) -> Principal:
    if creds is None:
        if settings.ENV == "local":
            return local_principal()
        raise _unauthorized("Missing token")

    claims = _claims(creds.credentials)
    try:
        user_id = uuid.UUID(str(claims.get("sub") or claims.get("user_id")))
        clinic_id = uuid.UUID(str(claims["clinic_id"]))
    except (KeyError, ValueError):
        log.info("Rejected token without a usable sub/clinic_id")
        raise _unauthorized("Token must carry sub and clinic_id")
    return Principal(user_id=user_id, clinic_id=clinic_id, roles=claims.get("roles", []), scopes=_scopes(claims))

def require_scopes(*needed: str):
    def dep(principal: Principal = Depends(get_principal)) -> Principal:
        missing = [s for s in needed if not principal.allows(s)]
        if missing:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Missing scopes: {' '.join(missing)}")
        return principal
    return dep
