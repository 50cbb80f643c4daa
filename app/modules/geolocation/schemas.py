"""
Pydantic schemas for geolocation results and provider payloads
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional, Union


class IpLookupResult(BaseModel):
    """Normalized lookup record returned to the rest of the application"""
    ip_address: str
    country_code: str = ""
    country_name: str = ""
    isp: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None


class ProviderPayload(BaseModel):
    """
    Lenient view of a provider response body.

    Unknown fields are ignored and any field that is not a string is treated
    as missing, so a partial or oddly-typed payload never raises.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    error: Union[bool, str, None] = None
    reason: Optional[str] = Field(default=None, validation_alias=AliasChoices("reason", "message"))

    country_code: Optional[str] = None
    country_name: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    isp: Optional[str] = None

    @field_validator("reason", "country_code", "country_name", "city", "region", "isp", mode="before")
    @classmethod
    def only_strings(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator("error", mode="before")
    @classmethod
    def error_flag(cls, v: Any):
        return v if isinstance(v, (bool, str)) else None

    def error_reason(self) -> Optional[str]:
        """Provider-reported error as text, or None for a usable payload"""
        flagged = self.error is True or (
            isinstance(self.error, str) and self.error.strip().lower() == "true"
        )
        if flagged:
            return self.reason or "Unknown error"
        return None

    def to_result(self, ip_address: str) -> IpLookupResult:
        return IpLookupResult(
            ip_address=ip_address,
            country_code=(self.country_code or "").upper(),
            country_name=self.country_name or "",
            isp=self.isp,
            city=self.city,
            region=self.region,
        )


class IpApiCoPayload(ProviderPayload):
    """ipapi.co: country_code, falling back to `country` (also a 2-letter code)"""
    country_code: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("country_code", "country")
    )
    isp: Optional[str] = Field(default=None, validation_alias=AliasChoices("org", "isp"))


class IpGeolocationIoPayload(ProviderPayload):
    """ipgeolocation.io: country_code2 / state_prov / isp"""
    country_code: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("country_code2", "country_code")
    )
    region: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("state_prov", "region")
    )
    isp: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("isp", "organization")
    )


class IpApiComPayload(ProviderPayload):
    """ip-api.com: status/message envelope, countryCode / country / regionName"""
    status: Optional[str] = None
    country_code: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("countryCode", "country_code")
    )
    country_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("country", "country_name")
    )
    region: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("regionName", "region")
    )
    isp: Optional[str] = Field(default=None, validation_alias=AliasChoices("org", "isp"))

    @field_validator("status", mode="before")
    @classmethod
    def status_string(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    def error_reason(self) -> Optional[str]:
        if self.status is not None and self.status.lower() == "fail":
            return self.reason or "Unknown error"
        return super().error_reason()
