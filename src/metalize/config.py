from typing import List, Optional, Union
from pathlib import Path
import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, ValidationError
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from .domain.models import Dialect
from .exceptions import ConfigurationError

def with_async_driver(url: Union[str, URL], driver_name: str) -> URL:
    """
    Parses a connection URL and adds the async driver when the URL names only
    the same backend: postgresql://... -> postgresql+asyncpg://...
    """
    try:
        url = make_url(url)
    except ArgumentError as e:
        raise ConfigurationError(f"Invalid connection URL: {e}")
    if "+" not in url.drivername and url.get_backend_name() == driver_name.split("+")[0]:
        return url.set(drivername=driver_name)
    return url

class ConnectionConfig(BaseModel):
    """
    Connection parameters for one database. Either a full SQLAlchemy `url`
    or the individual fields, from which a URL for the dialect's async
    driver is built.
    """
    url: Optional[str] = None
    host: str = "localhost"
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None

    def connection_url(self, driver_name: str) -> URL:
        if self.url:
            return with_async_driver(self.url, driver_name)
        return URL.create(
            drivername=driver_name,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

class DatabaseConfig(BaseModel):
    alias: str
    dialect: Dialect
    connection: ConnectionConfig

class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="METALIZE_")

    databases: List[DatabaseConfig] = []
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AppConfig":
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
            return cls(**raw_config)
        except (ValidationError, yaml.YAMLError, TypeError) as e:
            raise ConfigurationError(f"Invalid configuration format: {e}")

    def get_db_config(self, alias: str) -> DatabaseConfig:
        for db in self.databases:
            if db.alias == alias:
                return db
        raise ConfigurationError(f"Database alias '{alias}' not found in config")
