"""Operator identity supplied by the upstream authentication gateway."""

from fastapi import Header, HTTPException, status


def get_admin_id(
    x_admin_id: str | None = Header(
        None,
        alias="X-Admin-Id",
        description="Authenticated operator id forwarded by the gateway",
    ),
) -> str:
    """FastAPI dependency returning the operator id for audit fields.

    Credentials are verified upstream; this only insists the id is present.
    """
    if x_admin_id is None or not x_admin_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return x_admin_id.strip()
