"""Membership presentation layer - organized by join request scope.

Each package owns its routes and response models. Authentication is
declared per endpoint through get_caller.
"""

from __future__ import annotations

from fastapi import APIRouter

from membership.presentation import channel_join_requests, group_join_requests

router = APIRouter()

router.include_router(channel_join_requests.router)
router.include_router(group_join_requests.router)

__all__ = ["router"]
