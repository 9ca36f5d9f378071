"""HTTP routes for channel join requests."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from membership.application.services import ChannelJoinRequestService
from membership.application.value_objects import Caller
from membership.dependencies.authentication import get_caller
from membership.dependencies.channel_join_request import (
    get_channel_join_request_service,
)
from membership.domain.value_objects import ChannelId, JoinRequestId
from membership.presentation.channel_join_requests.models import (
    ChannelJoinRequestResponse,
)
from membership.presentation.errors import parse_path_id, to_http_exception
from membership.presentation.models import CreateJoinRequestRequest

router = APIRouter(
    prefix="/channels/{channel_id}/join-requests",
    tags=["channel-join-requests"],
)

_ERROR_RESPONSES = {
    400: {"description": "Invalid channel or join request ID"},
    401: {"description": "Authentication required"},
    403: {"description": "Caller may not perform this action"},
    404: {"description": "Channel, join request or user profile not found"},
    500: {"description": "Internal server error"},
}


@router.get(
    "",
    response_model=list[ChannelJoinRequestResponse],
    summary="List channel join requests",
    description=(
        "Channel owners see every pending request; other callers see only "
        "their own."
    ),
    responses=_ERROR_RESPONSES,
)
async def list_channel_join_requests(
    channel_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[
        ChannelJoinRequestService, Depends(get_channel_join_request_service)
    ],
) -> list[ChannelJoinRequestResponse]:
    """List pending join requests visible to the caller."""
    channel_id_obj = parse_path_id(ChannelId.from_string, channel_id, "channel")

    try:
        requests = await service.list_requests(channel_id_obj, caller)
    except Exception as e:
        raise to_http_exception(e, "Failed to list join requests") from e

    return [ChannelJoinRequestResponse.from_domain(r) for r in requests]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Request to join a channel",
    responses={
        **_ERROR_RESPONSES,
        409: {"description": "Caller is already a channel member"},
    },
)
async def create_channel_join_request(
    channel_id: str,
    request: CreateJoinRequestRequest,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[
        ChannelJoinRequestService, Depends(get_channel_join_request_service)
    ],
) -> ChannelJoinRequestResponse:
    """Create a join request for the caller.

    Repeating the call returns the caller's existing pending request
    unchanged.

    Raises:
        HTTPException: 409 if the caller is already a member
    """
    channel_id_obj = parse_path_id(ChannelId.from_string, channel_id, "channel")

    try:
        join_request = await service.create_request(
            channel_id_obj, caller, request.comment
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to create join request") from e

    return ChannelJoinRequestResponse.from_domain(join_request)


@router.get(
    "/{request_id}",
    summary="Get a channel join request",
    responses=_ERROR_RESPONSES,
)
async def get_channel_join_request(
    channel_id: str,
    request_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[
        ChannelJoinRequestService, Depends(get_channel_join_request_service)
    ],
) -> ChannelJoinRequestResponse:
    """Get one join request. Visible to channel owners and its sender."""
    channel_id_obj = parse_path_id(ChannelId.from_string, channel_id, "channel")
    request_id_obj = parse_path_id(
        JoinRequestId.from_string, request_id, "join request"
    )

    try:
        join_request = await service.get_request(
            channel_id_obj, request_id_obj, caller
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to get join request") from e

    return ChannelJoinRequestResponse.from_domain(join_request)


@router.delete(
    "/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel a channel join request",
    description="Only the user who sent the request may cancel it.",
    responses=_ERROR_RESPONSES,
)
async def cancel_channel_join_request(
    channel_id: str,
    request_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[
        ChannelJoinRequestService, Depends(get_channel_join_request_service)
    ],
) -> None:
    channel_id_obj = parse_path_id(ChannelId.from_string, channel_id, "channel")
    request_id_obj = parse_path_id(
        JoinRequestId.from_string, request_id, "join request"
    )

    try:
        await service.cancel_request(channel_id_obj, request_id_obj, caller)
    except Exception as e:
        raise to_http_exception(e, "Failed to cancel join request") from e


@router.post(
    "/{request_id}/acceptance",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Accept a channel join request",
    description="Channel owners only. The requestor becomes a channel member.",
    responses=_ERROR_RESPONSES,
)
async def accept_channel_join_request(
    channel_id: str,
    request_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[
        ChannelJoinRequestService, Depends(get_channel_join_request_service)
    ],
) -> None:
    channel_id_obj = parse_path_id(ChannelId.from_string, channel_id, "channel")
    request_id_obj = parse_path_id(
        JoinRequestId.from_string, request_id, "join request"
    )

    try:
        await service.accept_request(channel_id_obj, request_id_obj, caller)
    except Exception as e:
        raise to_http_exception(e, "Failed to accept join request") from e


@router.post(
    "/{request_id}/rejection",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reject a channel join request",
    description="Channel owners only. The request is removed.",
    responses=_ERROR_RESPONSES,
)
async def reject_channel_join_request(
    channel_id: str,
    request_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[
        ChannelJoinRequestService, Depends(get_channel_join_request_service)
    ],
) -> None:
    channel_id_obj = parse_path_id(ChannelId.from_string, channel_id, "channel")
    request_id_obj = parse_path_id(
        JoinRequestId.from_string, request_id, "join request"
    )

    try:
        await service.reject_request(channel_id_obj, request_id_obj, caller)
    except Exception as e:
        raise to_http_exception(e, "Failed to reject join request") from e
