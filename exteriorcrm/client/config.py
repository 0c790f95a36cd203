"""Client Configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for tools that talk to a running ExteriorCRM API."""

    model_config = SettingsConfigDict(env_prefix="EXTERIORCRM_CLIENT_")

    server_url: str = "http://127.0.0.1:8000"
    api_prefix: str = "/api"
    ws_path: str = "/ws"
    reconnect_delay_seconds: float = 3.0
    request_timeout_seconds: float = 10.0

    @property
    def api_url(self) -> str:
        return self.server_url.rstrip("/") + self.api_prefix

    @property
    def ws_url(self) -> str:
        base = self.server_url.rstrip("/")
        if base.startswith("https://"):
            base = "wss://" + base[len("https://"):]
        elif base.startswith("http://"):
            base = "ws://" + base[len("http://"):]
        return base + self.ws_path


settings = ClientSettings()
