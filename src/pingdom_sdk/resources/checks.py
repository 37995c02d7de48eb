from __future__ import annotations

from pingdom_sdk.client import PingdomClient
from pingdom_sdk.models import (
    CreateCheckInput,
    CreateCheckOutput,
    DeleteCheckInput,
    DeleteCheckOutput,
    GetCheckListInput,
    GetCheckListOutput,
    GetDetailedCheckInput,
    GetDetailedCheckOutput,
    ModifyCheckInput,
    ModifyCheckOutput,
)

CHECKS_PATH = "/api/2.0/checks"


def check_path(check_id: int) -> str:
    return f"{CHECKS_PATH}/{int(check_id)}"


async def get_check_list(
    client: PingdomClient, data: GetCheckListInput | None = None
) -> GetCheckListOutput:
    """List checks, optionally filtered by tags and limited/offset."""
    if data is None:
        data = GetCheckListInput()
    return await client.get(CHECKS_PATH, data=data, model=GetCheckListOutput)


async def get_detailed_check(
    client: PingdomClient, data: GetDetailedCheckInput
) -> GetDetailedCheckOutput:
    """Fetch one check including its type-specific settings."""
    return await client.get(check_path(data.check_id), model=GetDetailedCheckOutput)


async def create_check(
    client: PingdomClient, data: CreateCheckInput
) -> CreateCheckOutput:
    return await client.post(CHECKS_PATH, data=data, model=CreateCheckOutput)


async def modify_check(
    client: PingdomClient, data: ModifyCheckInput
) -> ModifyCheckOutput:
    """
    Overwrite settings on an existing check.
    The check type cannot be changed once the check exists.
    """
    return await client.put(
        check_path(data.check_id), data=data, model=ModifyCheckOutput
    )


async def delete_check(
    client: PingdomClient, data: DeleteCheckInput
) -> DeleteCheckOutput:
    return await client.delete(check_path(data.check_id), model=DeleteCheckOutput)


__all__ = [
    "CHECKS_PATH",
    "check_path",
    "get_check_list",
    "get_detailed_check",
    "create_check",
    "modify_check",
    "delete_check",
]
