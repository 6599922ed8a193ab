from typing import Optional
from fastapi import Header, Request


async def get_current_user_id(
    request: Request,
    x_user_id: Optional[int] = Header(None)
) -> Optional[int]:
    """Id of the caller as forwarded by the authentication gateway, if any."""
    request.state.current_user_id = x_user_id
    return x_user_id
