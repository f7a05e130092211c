from fastapi import HTTPException, Request


async def require_session(request: Request) -> None:
    """Guard that rejects requests without a live session.

    Usage:
        router = APIRouter(dependencies=[Depends(require_session)])
    """
    if not request.scope.get("user_session"):
        raise HTTPException(status_code=401, detail="Not authenticated")
