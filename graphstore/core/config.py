"""
Configuration module for graphstore-bench.

Uses pydantic-settings for environment-based configuration. The benchmark
harness hands the adapter a flat property map (``neo4j.url``, ``neo4j.user``,
...); ``Settings.from_properties`` translates that map into settings, with
environment variables and ``.env`` filling anything the harness leaves unset.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Harness property name -> settings field
PROPERTY_NAMES: dict[str, str] = {
    "neo4j.url": "neo4j_url",
    "neo4j.user": "neo4j_user",
    "neo4j.passwd": "neo4j_password",
    "neo4j.database": "neo4j_database",
    "neo4j.allowedtables": "allowed_tables",
}


class Settings(BaseSettings):
    """
    Adapter settings loaded from environment variables.

    Connection settings identify the target database; ``allowed_tables``
    optionally narrows which table names the adapter will turn into labels.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===========================================
    # NEO4J CONFIGURATION
    # ===========================================
    neo4j_url: str = Field(
        default="bolt://localhost:7687",
        description="Neo4j Bolt protocol URL",
    )
    neo4j_user: str = Field(default="neo4j", description="Neo4j username")
    neo4j_password: str = Field(default="neo4j", description="Neo4j password")
    neo4j_database: str = Field(
        default="neo4j",
        description="Database the workload runs against",
    )

    # ===========================================
    # WORKLOAD CONFIGURATION
    # ===========================================
    allowed_tables: str = Field(
        default="",
        description="Comma-separated table names accepted as labels (empty: any valid identifier)",
    )

    @field_validator("neo4j_url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.strip()

    @property
    def table_allow_list(self) -> frozenset[str]:
        """Parsed ``allowed_tables``; empty means no restriction."""
        return frozenset(
            name.strip() for name in self.allowed_tables.split(",") if name.strip()
        )

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> Settings:
        """Build settings from a harness property map.

        Unknown properties are ignored so the harness can share one property
        file between several bindings.
        """
        overrides = {
            field: properties[name]
            for name, field in PROPERTY_NAMES.items()
            if properties.get(name) is not None
        }
        return cls(**overrides)

