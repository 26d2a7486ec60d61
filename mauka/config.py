# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    supabase_url: str = ""
    supabase_service_key: str = ""
    supabase_jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"
    app_env: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:5173"

    avatars_bucket: str = "avatars"
    favorites_cookie_name: str = "favoriteOpportunities"
    favorites_cookie_max_age: int = 60 * 60 * 24 * 365

    mapbox_access_token: str = ""
    mapbox_country: str = "IN"
    reverse_geocode_timeout_seconds: float = 5.0
    ip_lookup_timeout_seconds: float = 5.0

    default_city: str = "Mumbai"
    default_state: str = "Maharashtra"
    default_country: str = "India"
    default_latitude: float = 19.0760
    default_longitude: float = 72.8777

    default_radius_km: int = 25
    nearby_limit: int = 20
    widget_timeout_seconds: float = 15.0

    sendgrid_api_key: str = ""
    mail_sender_email: str = "no-reply@example.com"
    mail_sender_name: str = "Mauka Team"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create an instance of Settings to be imported across the application
settings = Settings()
