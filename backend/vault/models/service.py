"""
Service record model: one entry of the shared credential catalog.
"""
from pydantic import BaseModel, ConfigDict, Field


class ServiceRecord(BaseModel):
    """
    A service account row from the record store, in canonical form.

    ``id`` is derived from the upstream row position and stays stable
    within one cached snapshot, so permission entries and favorites
    can refer to it.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable row identifier, e.g. service-3")
    service_name: str = Field(default="", description="Display name of the service")
    url: str = Field(default="", description="Login URL")
    account_id: str = Field(default="", description="Login / account identifier")
    password: str = Field(default="", description="Account password")
    password_kr: str = Field(default="", description="Password typed on a Korean keyboard layout")
    usage: str = Field(default="", description="What the account is used for")
    last_modified: str = Field(default="", description="Last modification date as written upstream")
    editor: str = Field(default="", description="Last editor")
    registrant: str = Field(default="", description="Who registered / verified the account")
    verified: str = Field(default="", description="Verification marker (O/X)")
    extra_fields: dict[str, str] = Field(
        default_factory=dict,
        description="Unrecognized upstream columns keyed by normalized header",
    )
