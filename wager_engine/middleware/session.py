from fastapi import Request, HTTPException


async def get_current_user_id(request: Request) -> int:
    """User id asserted by the identity provider in front of this service."""
    user_id_header = request.headers.get('X-User-Id')
    if not user_id_header:
        raise HTTPException(status_code=401, detail={"error": "unauthorized", "message": "X-User-Id header required"})
    try:
        return int(user_id_header)
    except ValueError:
        raise HTTPException(status_code=401, detail={"error": "unauthorized", "message": "X-User-Id must be numeric"})
