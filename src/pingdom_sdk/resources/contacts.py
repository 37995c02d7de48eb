from __future__ import annotations

from pingdom_sdk.client import PingdomClient
from pingdom_sdk.models import (
    CreateContactInput,
    CreateContactOutput,
    DeleteContactInput,
    DeleteContactOutput,
    GetContactListInput,
    GetContactListOutput,
    ModifyContactInput,
    ModifyContactOutput,
)

CONTACTS_PATH = "/api/2.0/notification_contacts"


def contact_path(contact_id: int) -> str:
    return f"{CONTACTS_PATH}/{int(contact_id)}"


async def get_contact_list(
    client: PingdomClient, data: GetContactListInput | None = None
) -> GetContactListOutput:
    if data is None:
        data = GetContactListInput()
    return await client.get(CONTACTS_PATH, data=data, model=GetContactListOutput)


async def create_contact(
    client: PingdomClient, data: CreateContactInput
) -> CreateContactOutput:
    """Create a notification contact that checks can alert."""
    return await client.post(CONTACTS_PATH, data=data, model=CreateContactOutput)


async def modify_contact(
    client: PingdomClient, data: ModifyContactInput
) -> ModifyContactOutput:
    return await client.put(
        contact_path(data.contact_id), data=data, model=ModifyContactOutput
    )


async def delete_contact(
    client: PingdomClient, data: DeleteContactInput
) -> DeleteContactOutput:
    return await client.delete(
        contact_path(data.contact_id), model=DeleteContactOutput
    )


__all__ = [
    "CONTACTS_PATH",
    "contact_path",
    "get_contact_list",
    "create_contact",
    "modify_contact",
    "delete_contact",
]
