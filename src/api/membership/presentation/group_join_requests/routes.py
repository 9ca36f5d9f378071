"""HTTP routes for group join requests."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from membership.application.services import GroupJoinRequestService
from membership.application.value_objects import Caller
from membership.dependencies.authentication import get_caller
from membership.dependencies.group_join_request import get_group_join_request_service
from membership.domain.value_objects import ChannelId, GroupId, JoinRequestId
from membership.presentation.errors import parse_path_id, to_http_exception
from membership.presentation.group_join_requests.models import (
    GroupJoinRequestResponse,
)
from membership.presentation.models import CreateJoinRequestRequest

router = APIRouter(
    prefix="/channels/{channel_id}/groups/{group_id}/join-requests",
    tags=["group-join-requests"],
)

_ERROR_RESPONSES = {
    400: {"description": "Invalid channel, group or join request ID"},
    401: {"description": "Authentication required"},
    403: {"description": "Caller may not perform this action"},
    404: {"description": "Group, join request or user profile not found"},
    500: {"description": "Internal server error"},
}


def _parse_scope(channel_id: str, group_id: str) -> tuple[ChannelId, GroupId]:
    return (
        parse_path_id(ChannelId.from_string, channel_id, "channel"),
        parse_path_id(GroupId.from_string, group_id, "group"),
    )


@router.get(
    "",
    response_model=list[GroupJoinRequestResponse],
    summary="List group join requests",
    description=(
        "Group members see every pending request; other callers see only "
        "their own."
    ),
    responses=_ERROR_RESPONSES,
)
async def list_group_join_requests(
    channel_id: str,
    group_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[GroupJoinRequestService, Depends(get_group_join_request_service)],
) -> list[GroupJoinRequestResponse]:
    channel_id_obj, group_id_obj = _parse_scope(channel_id, group_id)

    try:
        requests = await service.list_requests(channel_id_obj, group_id_obj, caller)
    except Exception as e:
        raise to_http_exception(e, "Failed to list join requests") from e

    return [GroupJoinRequestResponse.from_domain(r) for r in requests]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Request to join a group",
    description="Only members of the enclosing channel may request to join.",
    responses={
        **_ERROR_RESPONSES,
        409: {"description": "Caller is already a group member"},
    },
)
async def create_group_join_request(
    channel_id: str,
    group_id: str,
    request: CreateJoinRequestRequest,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[GroupJoinRequestService, Depends(get_group_join_request_service)],
) -> GroupJoinRequestResponse:
    channel_id_obj, group_id_obj = _parse_scope(channel_id, group_id)

    try:
        join_request = await service.create_request(
            channel_id_obj, group_id_obj, caller, request.comment
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to create join request") from e

    return GroupJoinRequestResponse.from_domain(join_request)


@router.get(
    "/{request_id}",
    summary="Get a group join request",
    responses=_ERROR_RESPONSES,
)
async def get_group_join_request(
    channel_id: str,
    group_id: str,
    request_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[GroupJoinRequestService, Depends(get_group_join_request_service)],
) -> GroupJoinRequestResponse:
    channel_id_obj, group_id_obj = _parse_scope(channel_id, group_id)
    request_id_obj = parse_path_id(
        JoinRequestId.from_string, request_id, "join request"
    )

    try:
        join_request = await service.get_request(
            channel_id_obj, group_id_obj, request_id_obj, caller
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to get join request") from e

    return GroupJoinRequestResponse.from_domain(join_request)


@router.delete(
    "/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel a group join request",
    responses=_ERROR_RESPONSES,
)
async def cancel_group_join_request(
    channel_id: str,
    group_id: str,
    request_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[GroupJoinRequestService, Depends(get_group_join_request_service)],
) -> None:
    channel_id_obj, group_id_obj = _parse_scope(channel_id, group_id)
    request_id_obj = parse_path_id(
        JoinRequestId.from_string, request_id, "join request"
    )

    try:
        await service.cancel_request(
            channel_id_obj, group_id_obj, request_id_obj, caller
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to cancel join request") from e


@router.post(
    "/{request_id}/acceptance",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Accept a group join request",
    description="Group members only. The requestor becomes a group member.",
    responses=_ERROR_RESPONSES,
)
async def accept_group_join_request(
    channel_id: str,
    group_id: str,
    request_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[GroupJoinRequestService, Depends(get_group_join_request_service)],
) -> None:
    channel_id_obj, group_id_obj = _parse_scope(channel_id, group_id)
    request_id_obj = parse_path_id(
        JoinRequestId.from_string, request_id, "join request"
    )

    try:
        await service.accept_request(
            channel_id_obj, group_id_obj, request_id_obj, caller
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to accept join request") from e


@router.post(
    "/{request_id}/rejection",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reject a group join request",
    responses=_ERROR_RESPONSES,
)
async def reject_group_join_request(
    channel_id: str,
    group_id: str,
    request_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[GroupJoinRequestService, Depends(get_group_join_request_service)],
) -> None:
    channel_id_obj, group_id_obj = _parse_scope(channel_id, group_id)
    request_id_obj = parse_path_id(
        JoinRequestId.from_string, request_id, "join request"
    )

    try:
        await service.reject_request(
            channel_id_obj, group_id_obj, request_id_obj, caller
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to reject join request") from e
