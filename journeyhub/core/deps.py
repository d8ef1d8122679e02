from fastapi import Header, HTTPException


def get_acting_user_id(x_user_id: str = Header(None)) -> str:
    """
    Acting user id, set by the upstream gateway after authentication.
    This service trusts the header and does not authenticate on its own.
    """
    if not x_user_id or not x_user_id.strip():
        print("[AUTH] reject reason=missing_x_user_id", flush=True)
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id.strip()
