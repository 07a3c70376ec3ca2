from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    server_host: str = "0.0.0.0"
    server_port: int = 8080
    # which store backs the listing/mutation ports: memory | database | http
    flag_backend: str = "memory"
    # Optional full database URL override (useful for tests)
    database_url: str = ""
    db_host: str = "db"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "flags_db"
    # Remote records API (flag_backend=http)
    records_api_url: str = ""
    records_api_token: str = ""
    records_api_timeout_seconds: float = 10.0
    # Listing request defaults
    flag_collection: str = "Feature_Flag__c"
    flag_list_view: str = "All"
    # comma separated field API names
    flag_sort_by: str = "Name"
    flag_page_size: int = 10
    # how many notifications the in-memory sink keeps for GET /api/v1/notifications
    notification_history_size: int = 50
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    def sort_fields(self) -> List[str]:
        return [f.strip() for f in self.flag_sort_by.split(",") if f.strip()]


# module-level settings instance for convenience across the app
settings = Settings()
