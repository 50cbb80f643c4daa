"""
Geolocation providers: URL builder plus payload schema per provider.

One provider is active per deployment (GEOLOCATION_PROVIDER).
"""
from abc import ABC, abstractmethod
from typing import Dict, Tuple, Type

from modules.geolocation.schemas import (
    IpApiComPayload,
    IpApiCoPayload,
    IpGeolocationIoPayload,
    ProviderPayload,
)


class GeolocationProvider(ABC):
    name: str = ""
    payload_model: Type[ProviderPayload] = ProviderPayload

    def __init__(self, api_key: str = ""):
        self.api_key = api_key

    @abstractmethod
    def build_request(self, ip_address: str) -> Tuple[str, Dict[str, str]]:
        """Path relative to the base URL and query parameters for one lookup"""
        raise NotImplementedError

    def parse(self, data: dict) -> ProviderPayload:
        return self.payload_model.model_validate(data)


class IpApiCoProvider(GeolocationProvider):
    name = "ipapi"
    payload_model = IpApiCoPayload

    def build_request(self, ip_address: str) -> Tuple[str, Dict[str, str]]:
        params = {"key": self.api_key} if self.api_key else {}
        return f"/{ip_address}/json/", params


class IpGeolocationIoProvider(GeolocationProvider):
    name = "ipgeolocation"
    payload_model = IpGeolocationIoPayload

    def build_request(self, ip_address: str) -> Tuple[str, Dict[str, str]]:
        return "/ipgeo", {"apiKey": self.api_key, "ip": ip_address}


class IpApiComProvider(GeolocationProvider):
    name = "ip-api"
    payload_model = IpApiComPayload

    FIELDS = "status,message,country,countryCode,regionName,city,isp,org"

    def build_request(self, ip_address: str) -> Tuple[str, Dict[str, str]]:
        params = {"fields": self.FIELDS}
        if self.api_key:
            params["key"] = self.api_key
        return f"/json/{ip_address}", params


PROVIDERS: Dict[str, Type[GeolocationProvider]] = {
    IpApiCoProvider.name: IpApiCoProvider,
    IpGeolocationIoProvider.name: IpGeolocationIoProvider,
    IpApiComProvider.name: IpApiComProvider,
}


def get_provider(name: str, api_key: str = "") -> GeolocationProvider:
    try:
        provider_cls = PROVIDERS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown geolocation provider: {name}")
    return provider_cls(api_key=api_key)
