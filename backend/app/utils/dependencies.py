from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..storage.base import Storage
from ..storage.records import User
from .error_handlers import get_error_message
from .jwt import decode_access_token

_bearer = HTTPBearer(auto_error=False)


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    storage: Storage = Depends(get_storage),
) -> User:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail=get_error_message("unauthorized"))

    claims = decode_access_token(credentials.credentials)
    user_id = (claims or {}).get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail=get_error_message("session_expired"))

    user = storage.get_user_by_id(str(user_id))
    if user is None:
        raise HTTPException(status_code=401, detail=get_error_message("session_expired"))
    return user
