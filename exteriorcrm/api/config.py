"""API Configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """Settings for the ExteriorCRM API."""

    model_config = SettingsConfigDict(env_prefix="EXTERIORCRM_API_")

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    # API
    api_prefix: str = "/api"
    title: str = "ExteriorCRM API"
    description: str = "Leads, estimates, jobs and communications with live updates"
    version: str = "0.1.0"

    # WebSocket
    ws_path: str = "/ws"

    # Branding seeded into a fresh store
    company_name: str = "Exterior Finishes"
    company_logo: str | None = None
    primary_color: str | None = "hsl(210, 60%, 45%)"
    secondary_color: str | None = "hsl(210, 30%, 25%)"
    accent_color: str | None = "hsl(210, 40%, 88%)"

    # Account seeded into a fresh store
    default_user_id: str = "user_1"
    default_user_username: str = "owner"
    default_user_email: str = "owner@example.com"
    default_user_first_name: str = "Alex"
    default_user_last_name: str = "Morgan"
    default_user_role: str = "Owner"

    # Outlook (Microsoft Graph)
    outlook_graph_url: str = "https://graph.microsoft.com/v1.0"
    outlook_access_token: str | None = None
    outlook_timeout_seconds: float = 30.0


settings = APISettings()
