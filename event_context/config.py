"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "event-context"
    debug: bool = False
    log_level: str = "INFO"
    module_name: str = "events"

    # Collection holding every events.Event node of a site
    events_path: str = "/aktionen"
    available_locales: list[str] = ["de", "en"]
    # gettext catalogs: <locale_dir>/<locale>/LC_MESSAGES/<gettext_domain>.mo
    locale_dir: str | None = None
    gettext_domain: str = "event-context"

    # Site layout: <sites_dir>/<site>/templates
    sites_dir: str = "sites"

    # Optional JSON file used to seed the in-memory node store
    seed_path: str | None = None

    model_config = {"env_prefix": "EVENTS_"}

    def site_templates_path(self, site: str) -> str:
        return str(Path(self.sites_dir) / site / "templates")


settings = Settings()
