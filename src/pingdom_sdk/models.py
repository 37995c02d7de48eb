from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from .query import Query

M = TypeVar("M", bound=BaseModel)

CHECK_TYPES = (
    "http",
    "httpcustom",
    "tcp",
    "ping",
    "dns",
    "udp",
    "smtp",
    "pop3",
    "imap",
)


class OutputModel(BaseModel):
    """Responses: wire keys are lowercase aliases; unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class InputModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


def apply_overrides(base: M, override: M) -> M:
    """
    Return a copy of ``base`` with every field explicitly set on ``override``.

    Fields left at their defaults on the override never clobber the base:
        apply_overrides(CheckConfiguration(name="a", resolution=5),
                        CheckConfiguration(resolution=1))
        -> CheckConfiguration(name="a", resolution=1)
    """
    if type(base) is not type(override):
        raise TypeError(
            f"Cannot apply {type(override).__name__} overrides "
            f"to {type(base).__name__}"
        )
    updates = {name: getattr(override, name) for name in override.model_fields_set}
    return base.model_copy(update=updates)


# --- Checks: listing ---


class CheckListTag(OutputModel):
    name: str = ""
    # "a" for auto-tagged, "u" for user-tagged
    type: str = ""
    count: int = 0


class CheckListEntry(OutputModel):
    id: int
    name: str = ""
    type: str = ""
    last_error_time: int = Field(default=0, alias="lasterrortime")
    last_test_time: int = Field(default=0, alias="lasttesttime")
    last_response_time: int = Field(default=0, alias="lastresponsetime")
    status: str = ""
    resolution: int = 0
    hostname: str = ""
    created: int = 0
    ipv6: bool = False
    tags: List[CheckListTag] = Field(default_factory=list)


class GetCheckListInput(InputModel):
    # Max 25000.
    limit: Annotated[Optional[int], Query("limit", omitempty=True)] = None
    # Requires limit.
    offset: Annotated[Optional[int], Query("offset", omitempty=True)] = None
    include_tags: Annotated[Optional[bool], Query("include_tags", omitempty=True)] = (
        None
    )
    tags: Annotated[List[str], Query("tags", omitempty=True, style="comma")] = Field(
        default_factory=list
    )


class GetCheckListOutput(OutputModel):
    checks: List[CheckListEntry] = Field(default_factory=list)


# --- Checks: detail ---


class DetailedCheckHTTP(OutputModel):
    url: str = ""
    encryption: bool = False
    port: int = 0
    username: str = ""
    password: str = ""
    should_contain: str = Field(default="", alias="shouldcontain")
    should_not_contain: str = Field(default="", alias="shouldnotcontain")
    post_data: str = Field(default="", alias="postdata")
    request_headers: Dict[str, str] = Field(
        default_factory=dict, alias="requestheaders"
    )


class DetailedCheckHTTPCustom(OutputModel):
    url: str = ""
    encryption: bool = False
    port: int = 0
    username: str = ""
    password: str = ""
    additional_urls: List[str] = Field(default_factory=list, alias="additionalurls")


class DetailedCheckTCP(OutputModel):
    port: int = 0
    string_to_send: str = Field(default="", alias="stringtosend")
    string_to_expect: str = Field(default="", alias="stringtoexpect")


class DetailedCheckDNS(OutputModel):
    dns_server: str = Field(default="", alias="dnsserver")
    expected_ip: str = Field(default="", alias="expectedip")


class DetailedCheckUDP(OutputModel):
    port: int = 0
    string_to_send: str = Field(default="", alias="stringtosend")
    string_to_expect: str = Field(default="", alias="stringtoexpect")


class DetailedCheckSMTP(OutputModel):
    port: int = 0
    username: str = ""
    password: str = ""
    encryption: bool = False
    string_to_expect: str = Field(default="", alias="stringtoexpect")


class DetailedCheckPOP3(OutputModel):
    port: int = 0
    encryption: bool = False
    string_to_expect: str = Field(default="", alias="stringtoexpect")


class DetailedCheckIMAP(OutputModel):
    port: int = 0
    encryption: bool = False
    string_to_expect: str = Field(default="", alias="stringtoexpect")


class DetailedCheckTypes(OutputModel):
    """The ``type`` object of a detailed check: one key, named after the type."""

    http: Optional[DetailedCheckHTTP] = None
    httpcustom: Optional[DetailedCheckHTTPCustom] = None
    tcp: Optional[DetailedCheckTCP] = None
    # Ping checks carry no settings; the API sends an empty container.
    ping: Optional[Any] = None
    dns: Optional[DetailedCheckDNS] = None
    udp: Optional[DetailedCheckUDP] = None
    smtp: Optional[DetailedCheckSMTP] = None
    pop3: Optional[DetailedCheckPOP3] = None
    imap: Optional[DetailedCheckIMAP] = None

    @property
    def name(self) -> Optional[str]:
        for check_type in CHECK_TYPES:
            if check_type in self.model_fields_set:
                return check_type
        return None


class DetailedCheckEntry(OutputModel):
    id: int
    name: str = ""
    hostname: str = ""
    status: str = ""
    resolution: int = 0
    type: DetailedCheckTypes = Field(default_factory=DetailedCheckTypes)
    contact_ids: List[int] = Field(default_factory=list, alias="contactids")
    send_to_email: bool = Field(default=False, alias="sendtoemail")
    send_to_sms: bool = Field(default=False, alias="sendtosms")
    send_to_twitter: bool = Field(default=False, alias="sendtotwitter")
    send_to_iphone: bool = Field(default=False, alias="sendtoiphone")
    send_to_android: bool = Field(default=False, alias="sendtoandroid")
    send_notification_when_down: int = Field(
        default=0, alias="sendnotificationwhendown"
    )
    notify_again_every: int = Field(default=0, alias="notifyagainevery")
    notify_when_back_up: bool = Field(default=False, alias="notifywhenbackup")
    last_error_time: int = Field(default=0, alias="lasterrortime")
    last_test_time: int = Field(default=0, alias="lasttesttime")
    last_response_time: int = Field(default=0, alias="lastresponsetime")
    created: int = 0
    ipv6: bool = False

    @property
    def check_type(self) -> Optional[str]:
        return self.type.name


class GetDetailedCheckInput(InputModel):
    check_id: int


class GetDetailedCheckOutput(OutputModel):
    check: DetailedCheckEntry


# --- Checks: create / modify / delete ---


class CheckConfiguration(InputModel):
    """Settings shared by every check type."""

    name: Annotated[Optional[str], Query("name", omitempty=True)] = None
    # Target hostname or IP address.
    host: Annotated[Optional[str], Query("host", omitempty=True)] = None
    # False must reach the API to unpause a check.
    paused: Annotated[Optional[bool], Query("paused", omitnone=True)] = None
    # One of 1, 5, 15, 30 or 60 minutes.
    resolution: Annotated[Optional[int], Query("resolution", omitempty=True)] = None
    contact_ids: Annotated[
        List[int], Query("contactids", omitempty=True, style="comma")
    ] = Field(default_factory=list)
    send_to_email: Annotated[Optional[bool], Query("sendtoemail", omitempty=True)] = (
        None
    )
    send_to_sms: Annotated[Optional[bool], Query("sendtosms", omitempty=True)] = None
    send_to_twitter: Annotated[
        Optional[bool], Query("sendtotwitter", omitempty=True)
    ] = None
    send_to_iphone: Annotated[
        Optional[bool], Query("sendtoiphone", omitempty=True)
    ] = None
    send_to_android: Annotated[
        Optional[bool], Query("sendtoandroid", omitempty=True)
    ] = None
    send_notification_when_down: Annotated[
        Optional[int], Query("sendnotificationwhendown", omitempty=True)
    ] = None
    notify_again_every: Annotated[
        Optional[int], Query("notifyagainevery", omitempty=True)
    ] = None
    notify_when_back_up: Annotated[
        Optional[bool], Query("notifywhenbackup", omitempty=True)
    ] = None
    tags: Annotated[List[str], Query("tags", omitempty=True, style="comma")] = Field(
        default_factory=list
    )
    # Ignored by the API when host is an IP literal.
    ipv6: Annotated[Optional[bool], Query("ipv6", omitempty=True)] = None


class HTTPCheck(InputModel):
    type: Literal["http"] = "http"
    url: Annotated[Optional[str], Query("url", omitempty=True)] = None
    encryption: Annotated[Optional[bool], Query("encryption", omitempty=True)] = None
    port: Annotated[Optional[int], Query("port", omitempty=True)] = None
    # "user:password"
    auth: Annotated[Optional[str], Query("auth", omitempty=True)] = None
    should_contain: Annotated[
        Optional[str], Query("shouldcontain", omitempty=True)
    ] = None
    should_not_contain: Annotated[
        Optional[str], Query("shouldnotcontain", omitempty=True)
    ] = None
    post_data: Annotated[Optional[str], Query("postdata", omitempty=True)] = None
    # "Name:value" pairs, sent as requestheader0, requestheader1, ...
    request_headers: Annotated[
        List[str], Query("requestheader", omitempty=True, style="numbered")
    ] = Field(default_factory=list)


class HTTPCustomCheck(InputModel):
    type: Literal["httpcustom"] = "httpcustom"
    url: Annotated[Optional[str], Query("url", omitempty=True)] = None
    encryption: Annotated[Optional[bool], Query("encryption", omitempty=True)] = None
    port: Annotated[Optional[int], Query("port", omitempty=True)] = None
    auth: Annotated[Optional[str], Query("auth", omitempty=True)] = None
    additional_urls: Annotated[
        List[str], Query("additionalurls", omitempty=True, style="semicolon")
    ] = Field(default_factory=list)


class TCPCheck(InputModel):
    type: Literal["tcp"] = "tcp"
    port: Annotated[Optional[int], Query("port", omitempty=True)] = None
    string_to_send: Annotated[
        Optional[str], Query("stringtosend", omitempty=True)
    ] = None
    string_to_expect: Annotated[
        Optional[str], Query("stringtoexpect", omitempty=True)
    ] = None


class PingCheck(InputModel):
    type: Literal["ping"] = "ping"


class DNSCheck(InputModel):
    type: Literal["dns"] = "dns"
    name_server: Annotated[Optional[str], Query("nameserver", omitempty=True)] = None
    expected_ip: Annotated[Optional[str], Query("expectedip", omitempty=True)] = None


class UDPCheck(InputModel):
    type: Literal["udp"] = "udp"
    port: Annotated[Optional[int], Query("port", omitempty=True)] = None
    string_to_send: Annotated[
        Optional[str], Query("stringtosend", omitempty=True)
    ] = None
    string_to_expect: Annotated[
        Optional[str], Query("stringtoexpect", omitempty=True)
    ] = None


class SMTPCheck(InputModel):
    type: Literal["smtp"] = "smtp"
    port: Annotated[Optional[int], Query("port", omitempty=True)] = None
    auth: Annotated[Optional[str], Query("auth", omitempty=True)] = None
    # STARTTLS
    encryption: Annotated[Optional[bool], Query("encryption", omitempty=True)] = None
    string_to_expect: Annotated[
        Optional[str], Query("stringtoexpect", omitempty=True)
    ] = None


class POP3Check(InputModel):
    type: Literal["pop3"] = "pop3"
    port: Annotated[Optional[int], Query("port", omitempty=True)] = None
    encryption: Annotated[Optional[bool], Query("encryption", omitempty=True)] = None
    string_to_expect: Annotated[
        Optional[str], Query("stringtoexpect", omitempty=True)
    ] = None


class IMAPCheck(InputModel):
    type: Literal["imap"] = "imap"
    port: Annotated[Optional[int], Query("port", omitempty=True)] = None
    encryption: Annotated[Optional[bool], Query("encryption", omitempty=True)] = None
    string_to_expect: Annotated[
        Optional[str], Query("stringtoexpect", omitempty=True)
    ] = None


CheckType = Annotated[
    Union[
        HTTPCheck,
        HTTPCustomCheck,
        TCPCheck,
        PingCheck,
        DNSCheck,
        UDPCheck,
        SMTPCheck,
        POP3Check,
        IMAPCheck,
    ],
    Field(discriminator="type"),
]


class CreateCheckInput(InputModel):
    configuration: CheckConfiguration
    check: CheckType


class CreateCheckEntry(OutputModel):
    id: int
    name: str = ""


class CreateCheckOutput(OutputModel):
    check: CreateCheckEntry


class ModifyCheckInput(InputModel):
    """
    Settings overwrite the existing values. The check type cannot change
    after creation, so a supplied ``check`` only contributes its settings.
    """

    check_id: Annotated[int, Query(exclude=True)]
    configuration: CheckConfiguration = Field(default_factory=CheckConfiguration)
    check: Annotated[
        Optional[CheckType], Query(omitempty=True, skip_keys=("type",))
    ] = None


class ModifyCheckOutput(OutputModel):
    message: str = ""


class DeleteCheckInput(InputModel):
    check_id: int


class DeleteCheckOutput(OutputModel):
    message: str = ""


# --- Notification contacts ---


class ContactListEntry(OutputModel):
    id: int
    name: str = ""
    email: str = ""
    cellphone: str = ""
    country_iso: str = Field(default="", alias="countryiso")
    default_sms_provider: str = Field(default="", alias="defaultsmsprovider")
    direct_twitter: bool = Field(default=False, alias="directtwitter")
    twitter_user: str = Field(default="", alias="twitteruser")
    iphone_tokens: List[str] = Field(default_factory=list, alias="iphonetokens")
    android_tokens: List[str] = Field(default_factory=list, alias="androidtokens")
    paused: bool = False


class GetContactListInput(InputModel):
    limit: Annotated[Optional[int], Query("limit", omitempty=True)] = None
    offset: Annotated[Optional[int], Query("offset", omitempty=True)] = None


class GetContactListOutput(OutputModel):
    contacts: List[ContactListEntry] = Field(default_factory=list)


class ContactConfiguration(InputModel):
    name: Annotated[Optional[str], Query("name", omitempty=True)] = None
    email: Annotated[Optional[str], Query("email", omitempty=True)] = None
    # Without the country code; requires country_code and country_iso.
    cellphone: Annotated[Optional[str], Query("cellphone", omitempty=True)] = None
    country_code: Annotated[Optional[str], Query("countrycode", omitempty=True)] = (
        None
    )
    # e.g. US, GB, SE
    country_iso: Annotated[Optional[str], Query("countryiso", omitempty=True)] = None
    # clickatell, bulksms, esendex or cellsynt
    default_sms_provider: Annotated[
        Optional[str], Query("defaultsmsprovider", omitempty=True)
    ] = None
    direct_twitter: Annotated[
        Optional[bool], Query("directtwitter", omitempty=True)
    ] = None
    twitter_user: Annotated[Optional[str], Query("twitteruser", omitempty=True)] = (
        None
    )


class CreateContactInput(InputModel):
    configuration: ContactConfiguration


class CreateContactEntry(OutputModel):
    id: int
    name: str = ""


class CreateContactOutput(OutputModel):
    contact: CreateContactEntry


class ModifyContactInput(InputModel):
    contact_id: Annotated[int, Query(exclude=True)]
    configuration: ContactConfiguration = Field(default_factory=ContactConfiguration)


class ModifyContactOutput(OutputModel):
    message: str = ""


class DeleteContactInput(InputModel):
    contact_id: int


class DeleteContactOutput(OutputModel):
    message: str = ""
