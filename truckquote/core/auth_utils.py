"""Authentication and authorization utilities"""
from fastapi import HTTPException
from typing import Optional
from truckquote.core.enums import UserRole


def check_ownership(item, current_user, resource_name: str = "Resource") -> None:

    if current_user.role != UserRole.ADMIN and item.user_id != int(current_user.id):
        raise HTTPException(
            status_code=403,
            detail=f"Forbidden: You can only access your own {resource_name}s"
        )


def check_not_found(item, resource_name: str = "Resource", resource_id: Optional[int] = None) -> None:

    if not item:
        if resource_id:
            raise HTTPException(
                status_code=404,
                detail=f"{resource_name} with id {resource_id} not found"
            )
        raise HTTPException(status_code=404, detail=f"{resource_name} not found")
