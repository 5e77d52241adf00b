"""
Unit tests for adapter configuration.
"""

import pytest

from graphstore.core.config import PROPERTY_NAMES, Settings


class TestSettingsDefaults:
    """Tests for default values and environment loading."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("NEO4J_URL", "NEO4J_USER", "NEO4J_PASSWORD", "NEO4J_DATABASE"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings(_env_file=None)

        assert settings.neo4j_url == "bolt://localhost:7687"
        assert settings.neo4j_user == "neo4j"
        assert settings.neo4j_database == "neo4j"
        assert settings.table_allow_list == frozenset()

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NEO4J_URL", "neo4j://graph.internal:7687")
        monkeypatch.setenv("NEO4J_PASSWORD", "s3cret")

        settings = Settings(_env_file=None)

        assert settings.neo4j_url == "neo4j://graph.internal:7687"
        assert settings.neo4j_password == "s3cret"

    def test_allow_list_is_parsed(self) -> None:
        settings = Settings(allowed_tables=" usertable,ordertable ,, ")

        assert settings.table_allow_list == frozenset({"usertable", "ordertable"})


class TestFromProperties:
    """Tests for building settings from the harness property map."""

    def test_maps_harness_property_names(self) -> None:
        settings = Settings.from_properties(
            {
                "neo4j.url": "bolt://db:7687",
                "neo4j.user": "bench",
                "neo4j.passwd": "pw",
                "neo4j.database": "ycsb",
                "neo4j.allowedtables": "usertable",
            }
        )

        assert settings.neo4j_url == "bolt://db:7687"
        assert settings.neo4j_user == "bench"
        assert settings.neo4j_password == "pw"
        assert settings.neo4j_database == "ycsb"
        assert settings.table_allow_list == frozenset({"usertable"})

    def test_unset_properties_fall_back_to_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("NEO4J_USER", "from-env")

        settings = Settings.from_properties({"neo4j.url": "bolt://db:7687"})

        assert settings.neo4j_user == "from-env"

    def test_ignores_unrelated_properties(self) -> None:
        settings = Settings.from_properties(
            {"recordcount": "1000", "workload": "site.ycsb.workloads.CoreWorkload"}
        )

        assert isinstance(settings, Settings)

    def test_every_property_maps_to_a_field(self) -> None:
        assert set(PROPERTY_NAMES.values()) <= set(Settings.model_fields)
