"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Mon Oct 06 2025
# SPDX-License-Identifier: MIT

Location detection and address geocoding.

Detection walks an ordered list of strategies and keeps the first one that
answers: coordinates the browser shared (reverse geocoded), then two IP
geolocation providers with different response shapes. Every step runs with its
own deadline. When all of them fail the configured default location is
returned, so detection never fails for the caller.
"""

import ipaddress
import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import List, Optional, Sequence
from urllib.parse import quote

import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mauka.config import settings
from mauka.crud import crud_location
from mauka.errors import GeocodingNotConfigured, LocationUnavailable
from mauka.schemas import schemas

logger = logging.getLogger(__name__)

REVERSE_GEOCODE_URL = "https://api.bigdatacloud.net/data/reverse-geocode-client"
IPAPI_CO_URL = "https://ipapi.co/json/"
IPAPI_CO_ADDRESS_URL = "https://ipapi.co/{ip}/json/"
IP_API_COM_URL = "http://ip-api.com/json/"
IP_API_COM_ADDRESS_URL = "http://ip-api.com/json/{ip}"
MAPBOX_GEOCODE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="location")


class LocationStrategyError(Exception):
    pass


class LocationStrategy:
    name = "strategy"

    def __init__(self, timeout: float):
        self.timeout = timeout

    def locate(self) -> schemas.DetectedLocation:
        raise NotImplementedError

    def _get_json(self, url: str, **params) -> dict:
        response = requests.get(
            url, params=params or None, headers={"Accept": "application/json"}, timeout=self.timeout
        )
        if not response.ok:
            raise LocationStrategyError(f"HTTP {response.status_code}: Failed to fetch location")
        data = response.json()
        if not isinstance(data, dict):
            raise LocationStrategyError("Unexpected location payload")
        return data


class BrowserCoordinates(LocationStrategy):
    """
    Coordinates the client obtained from the browser's geolocation API.
    ``None`` means the user did not grant the permission.
    """

    name = "browser"

    def __init__(self, coordinates: Optional[schemas.Coordinates], timeout: float):
        super().__init__(timeout)
        self.coordinates = coordinates

    def locate(self) -> schemas.DetectedLocation:
        if self.coordinates is None:
            raise LocationStrategyError("Geolocation permission was not granted")
        data = self._get_json(
            REVERSE_GEOCODE_URL,
            latitude=self.coordinates.latitude,
            longitude=self.coordinates.longitude,
            localityLanguage="en",
        )
        return schemas.DetectedLocation(
            city=data.get("city") or data.get("locality") or "",
            state=data.get("principalSubdivision") or data.get("administrativeArea") or "",
            country=data.get("countryName") or "",
            latitude=self.coordinates.latitude,
            longitude=self.coordinates.longitude,
            source=self.name,
        )


class IpApiCo(LocationStrategy):
    name = "ipapi.co"

    def __init__(self, client_ip: Optional[str], timeout: float):
        super().__init__(timeout)
        self.client_ip = client_ip

    def locate(self) -> schemas.DetectedLocation:
        url = IPAPI_CO_ADDRESS_URL.format(ip=self.client_ip) if self.client_ip else IPAPI_CO_URL
        data = self._get_json(url)
        if data.get("error"):
            raise LocationStrategyError(data.get("reason") or "Location detection failed")
        return schemas.DetectedLocation(
            city=data.get("city") or "",
            state=data.get("region") or "",
            country=data.get("country_name") or "",
            latitude=data.get("latitude") or 0,
            longitude=data.get("longitude") or 0,
            source=self.name,
        )


class IpApiCom(LocationStrategy):
    name = "ip-api.com"

    def __init__(self, client_ip: Optional[str], timeout: float):
        super().__init__(timeout)
        self.client_ip = client_ip

    def locate(self) -> schemas.DetectedLocation:
        url = IP_API_COM_ADDRESS_URL.format(ip=self.client_ip) if self.client_ip else IP_API_COM_URL
        data = self._get_json(url)
        if data.get("status") == "fail":
            raise LocationStrategyError(data.get("message") or "Location detection failed")
        return schemas.DetectedLocation(
            city=data.get("city") or "",
            state=data.get("regionName") or "",
            country=data.get("country") or "",
            latitude=data.get("lat") or 0,
            longitude=data.get("lon") or 0,
            source=self.name,
        )


def first_success(strategies: Sequence[LocationStrategy]) -> schemas.DetectedLocation:
    """
    Returns the result of the first strategy that answers within its own timeout.
    Raises LocationUnavailable when none does.
    """
    for strategy in strategies:
        future = _executor.submit(strategy.locate)
        try:
            return future.result(timeout=strategy.timeout)
        except FutureTimeout:
            future.cancel()
            logger.warning("Location strategy %s timed out after %ss", strategy.name, strategy.timeout)
        except (LocationStrategyError, requests.RequestException, ValueError) as error:
            logger.warning("Location strategy %s failed: %s", strategy.name, error)
    raise LocationUnavailable()


def public_ip(client_ip: Optional[str]) -> Optional[str]:
    """
    Only globally routable addresses are worth looking up.
    """
    if not client_ip:
        return None
    try:
        address = ipaddress.ip_address(client_ip)
    except ValueError:
        return None
    return client_ip if address.is_global else None


def default_location() -> schemas.DetectedLocation:
    return schemas.DetectedLocation(
        city=settings.default_city,
        state=settings.default_state,
        country=settings.default_country,
        latitude=settings.default_latitude,
        longitude=settings.default_longitude,
        source="default",
    )


def build_strategies(
    coordinates: Optional[schemas.Coordinates] = None, client_ip: Optional[str] = None
) -> List[LocationStrategy]:
    ip = public_ip(client_ip)
    return [
        BrowserCoordinates(coordinates, settings.reverse_geocode_timeout_seconds),
        IpApiCo(ip, settings.ip_lookup_timeout_seconds),
        IpApiCom(ip, settings.ip_lookup_timeout_seconds),
    ]


def detect_location(
    coordinates: Optional[schemas.Coordinates] = None, client_ip: Optional[str] = None
) -> schemas.DetectedLocation:
    try:
        return first_success(build_strategies(coordinates, client_ip))
    except LocationUnavailable:
        logger.warning("All location services failed, using default location")
        return default_location()


def geocode_address(db: Session, address: str) -> Optional[schemas.LocationCacheEntry]:
    """
    Resolves an address to coordinates, reading the shared cache before calling Mapbox.
    Returns None when Mapbox has no match or cannot be reached.
    """
    cached = crud_location.get_cached_location(db, address)
    if cached:
        return schemas.LocationCacheEntry.model_validate(cached)

    if not settings.mapbox_access_token:
        raise GeocodingNotConfigured()

    try:
        response = requests.get(
            MAPBOX_GEOCODE_URL.format(query=quote(address)),
            params={"access_token": settings.mapbox_access_token, "country": settings.mapbox_country},
            timeout=settings.reverse_geocode_timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as error:
        logger.error("Geocoding error for %r: %s", address, error)
        return None

    features = data.get("features") or []
    if not features:
        return None

    feature = features[0]
    longitude, latitude = feature["center"]
    context = feature.get("context") or []

    def from_context(prefix: str) -> Optional[str]:
        return next((item.get("text") for item in context if str(item.get("id", "")).startswith(prefix)), None)

    location = schemas.LocationCacheEntry(
        address=address,
        city=from_context("place"),
        state=from_context("region"),
        pincode=from_context("postcode"),
        latitude=latitude,
        longitude=longitude,
    )
    try:
        return schemas.LocationCacheEntry.model_validate(crud_location.cache_location(db, location))
    except SQLAlchemyError as error:
        logger.warning("Failed to cache location %r: %s", address, error)
        return location
