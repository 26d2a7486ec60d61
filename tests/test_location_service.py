'''
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Sun Oct 12 2025
# SPDX-License-Identifier: MIT
'''

import time
from unittest.mock import MagicMock

import pytest
import requests
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mauka.config import settings
from mauka.db import models
from mauka.errors import GeocodingNotConfigured, LocationUnavailable
from mauka.schemas import schemas
from mauka.services import location_service
from mauka.services.location_service import (
    BrowserCoordinates,
    IpApiCo,
    IpApiCom,
    LocationStrategy,
    detect_location,
    first_success,
    geocode_address,
    public_ip,
)


def json_response(payload, status_code: int = 200) -> MagicMock:
    response = MagicMock(status_code=status_code, ok=status_code < 400)
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


def route(responses: dict):
    """
    Fakes requests.get, answering by URL prefix. An exception value is raised instead of returned.
    """

    def fake_get(url, *args, **kwargs):
        for prefix, answer in responses.items():
            if url.startswith(prefix):
                if isinstance(answer, Exception):
                    raise answer
                return answer
        raise AssertionError(f"Unexpected request to {url}")

    return fake_get


IPAPI_CO_PAYLOAD = {
    "city": "Pune",
    "region": "Maharashtra",
    "country_name": "India",
    "latitude": 18.5204,
    "longitude": 73.8567,
}

IP_API_COM_PAYLOAD = {
    "status": "success",
    "city": "Bengaluru",
    "regionName": "Karnataka",
    "country": "India",
    "lat": 12.9716,
    "lon": 77.5946,
}


def test_browser_coordinates_are_reverse_geocoded(mocker):
    get = mocker.patch(
        "mauka.services.location_service.requests.get",
        return_value=json_response(
            {"city": "", "locality": "Andheri", "principalSubdivision": "Maharashtra", "countryName": "India"}
        ),
    )

    location = detect_location(schemas.Coordinates(latitude=19.1136, longitude=72.8697), "49.36.0.1")

    assert location.source == "browser"
    assert (location.city, location.state, location.country) == ("Andheri", "Maharashtra", "India")
    assert (location.latitude, location.longitude) == (19.1136, 72.8697)
    assert get.call_args.kwargs["params"]["localityLanguage"] == "en"


def test_denied_permission_falls_through_to_primary_ip_provider(mocker):
    get = mocker.patch(
        "mauka.services.location_service.requests.get",
        side_effect=route({"https://ipapi.co/": json_response(IPAPI_CO_PAYLOAD)}),
    )

    location = detect_location(None, "49.36.0.1")

    assert location.source == "ipapi.co"
    assert location.city == "Pune"
    assert location.latitude == 18.5204
    assert get.call_args.args[0] == "https://ipapi.co/49.36.0.1/json/"


def test_primary_error_payload_falls_through_to_secondary(mocker):
    mocker.patch(
        "mauka.services.location_service.requests.get",
        side_effect=route(
            {
                "https://ipapi.co/": json_response({"error": True, "reason": "RateLimited"}),
                "http://ip-api.com/": json_response(IP_API_COM_PAYLOAD),
            }
        ),
    )

    location = detect_location(None, None)

    assert location.source == "ip-api.com"
    assert (location.city, location.state) == ("Bengaluru", "Karnataka")
    assert (location.latitude, location.longitude) == (12.9716, 77.5946)


def test_all_strategies_failing_returns_default(mocker, caplog):
    mocker.patch(
        "mauka.services.location_service.requests.get",
        side_effect=route(
            {
                "https://api.bigdatacloud.net/": requests.ConnectionError("unreachable"),
                "https://ipapi.co/": json_response({}, status_code=429),
                "http://ip-api.com/": json_response({"status": "fail", "message": "private range"}),
            }
        ),
    )

    location = detect_location(schemas.Coordinates(latitude=1.0, longitude=2.0), "10.0.0.4")

    assert location.source == "default"
    assert (location.city, location.state, location.country) == ("Mumbai", "Maharashtra", "India")
    assert (location.latitude, location.longitude) == (19.0760, 72.8777)
    assert "All location services failed, using default location" in caplog.text


@pytest.mark.parametrize("payload", [None, [], "Pune"])
def test_non_object_payloads_fall_through_to_default(mocker, payload):
    mocker.patch(
        "mauka.services.location_service.requests.get",
        side_effect=route(
            {
                "https://api.bigdatacloud.net/": json_response(payload),
                "https://ipapi.co/": json_response(payload),
                "http://ip-api.com/": json_response(payload),
            }
        ),
    )

    location = detect_location(schemas.Coordinates(latitude=18.52, longitude=73.85), "49.36.0.1")

    assert location.source == "default"
    assert location.city == "Mumbai"


class SlowStrategy(LocationStrategy):
    name = "slow"

    def locate(self):
        time.sleep(1)
        return location_service.default_location()


class FixedStrategy(LocationStrategy):
    name = "fixed"

    def locate(self):
        return schemas.DetectedLocation(
            city="Delhi", state="Delhi", country="India", latitude=28.61, longitude=77.2, source=self.name
        )


def test_slow_strategy_is_abandoned_after_its_timeout():
    started = time.monotonic()

    location = first_success([SlowStrategy(timeout=0.1), FixedStrategy(timeout=0.1)])

    assert location.city == "Delhi"
    assert time.monotonic() - started < 0.8


def test_first_success_raises_when_nothing_answers():
    with pytest.raises(LocationUnavailable):
        first_success([SlowStrategy(timeout=0.05), BrowserCoordinates(None, timeout=0.05)])


def test_public_ip_skips_private_and_invalid_addresses():
    assert public_ip("49.36.0.1") == "49.36.0.1"
    assert public_ip("192.168.1.10") is None
    assert public_ip("127.0.0.1") is None
    assert public_ip("testclient") is None
    assert public_ip(None) is None


def test_ip_strategies_use_own_address_without_client_ip():
    assert IpApiCo(None, 1).client_ip is None
    assert IpApiCom("8.8.8.8", 1).client_ip == "8.8.8.8"


# --- Address geocoding ---

MAPBOX_PAYLOAD = {
    "features": [
        {
            "center": [72.8311, 18.9220],
            "context": [
                {"id": "postcode.1", "text": "400001"},
                {"id": "place.2", "text": "Mumbai"},
                {"id": "region.3", "text": "Maharashtra"},
            ],
        }
    ]
}


def test_geocode_uses_cache_before_mapbox(db_session: Session, mocker):
    db_session.add(
        models.LocationCache(address="Fort, Mumbai", city="Mumbai", state="Maharashtra", latitude=18.93, longitude=72.83)
    )
    db_session.commit()
    get = mocker.patch("mauka.services.location_service.requests.get")

    location = geocode_address(db_session, "Fort, Mumbai")

    assert location.latitude == 18.93
    get.assert_not_called()


def test_geocode_calls_mapbox_and_caches(db_session: Session, mocker):
    mocker.patch.object(settings, "mapbox_access_token", "pk.test")
    get = mocker.patch("mauka.services.location_service.requests.get", return_value=json_response(MAPBOX_PAYLOAD))

    location = geocode_address(db_session, "Gateway of India")

    assert (location.city, location.state, location.pincode) == ("Mumbai", "Maharashtra", "400001")
    assert (location.latitude, location.longitude) == (18.9220, 72.8311)
    assert get.call_args.kwargs["params"] == {"access_token": "pk.test", "country": "IN"}
    assert db_session.query(models.LocationCache).filter_by(address="Gateway of India").count() == 1


def test_geocode_returns_result_when_cache_write_fails(db_session: Session, mocker, caplog):
    mocker.patch.object(settings, "mapbox_access_token", "pk.test")
    mocker.patch("mauka.services.location_service.requests.get", return_value=json_response(MAPBOX_PAYLOAD))
    mocker.patch(
        "mauka.crud.crud_location.cache_location",
        side_effect=IntegrityError("INSERT", {}, Exception("duplicate key")),
    )

    location = geocode_address(db_session, "Gateway of India")

    assert location.city == "Mumbai"
    assert location.id is None
    assert "Failed to cache location" in caplog.text


def test_geocode_without_token_is_an_error(db_session: Session, mocker):
    mocker.patch.object(settings, "mapbox_access_token", "")
    with pytest.raises(GeocodingNotConfigured):
        geocode_address(db_session, "Somewhere")


def test_geocode_transport_failure_returns_none(db_session: Session, mocker):
    mocker.patch.object(settings, "mapbox_access_token", "pk.test")
    mocker.patch(
        "mauka.services.location_service.requests.get", side_effect=requests.Timeout("read timed out")
    )
    assert geocode_address(db_session, "Somewhere") is None
