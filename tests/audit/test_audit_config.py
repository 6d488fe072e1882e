"""Tests for audit configuration resolution."""

import pytest
from remitwise.audit.config import (
    AuditConfig,
    AuditDestination,
    get_config,
    reset_config,
    set_config,
)


class TestAuditConfigDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = AuditConfig()

        assert config.enabled is True
        assert config.destination == AuditDestination.STREAM
        assert config.retention_days == 90
        assert config.include_metadata is True

    def test_empty_environment_gives_defaults(self):
        assert AuditConfig.from_env({}) == AuditConfig()

    def test_config_is_frozen(self):
        config = AuditConfig()

        with pytest.raises(AttributeError):
            config.enabled = False


class TestAuditConfigFromEnv:
    """Tests for AuditConfig.from_env()."""

    def test_enabled_false_disables(self):
        assert AuditConfig.from_env({"AUDIT_LOG_ENABLED": "false"}).enabled is False

    @pytest.mark.parametrize("value", ["true", "0", "no", "False", ""])
    def test_anything_but_false_enables(self, value):
        assert AuditConfig.from_env({"AUDIT_LOG_ENABLED": value}).enabled is True

    def test_database_destination(self):
        config = AuditConfig.from_env({"AUDIT_LOG_DESTINATION": "database"})

        assert config.destination == AuditDestination.PERSISTENT

    def test_stdout_destination(self):
        config = AuditConfig.from_env({"AUDIT_LOG_DESTINATION": "stdout"})

        assert config.destination == AuditDestination.STREAM

    def test_unknown_destination_falls_back_to_stream(self):
        config = AuditConfig.from_env({"AUDIT_LOG_DESTINATION": "kafka"})

        assert config.destination == AuditDestination.STREAM

    def test_retention_days(self):
        assert AuditConfig.from_env({"AUDIT_RETENTION_DAYS": "30"}).retention_days == 30

    def test_invalid_retention_days_falls_back(self):
        assert AuditConfig.from_env({"AUDIT_RETENTION_DAYS": "forever"}).retention_days == 90

    def test_include_metadata_false(self):
        config = AuditConfig.from_env({"AUDIT_INCLUDE_METADATA": "false"})

        assert config.include_metadata is False

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("AUDIT_LOG_ENABLED", "false")
        monkeypatch.setenv("AUDIT_LOG_DESTINATION", "database")

        config = AuditConfig.from_env()

        assert config.enabled is False
        assert config.destination == AuditDestination.PERSISTENT


class TestGlobalConfig:
    """Tests for get_config/set_config/reset_config."""

    def test_get_config_reads_environment_once(self, monkeypatch):
        monkeypatch.setenv("AUDIT_RETENTION_DAYS", "7")

        first = get_config()
        monkeypatch.setenv("AUDIT_RETENTION_DAYS", "14")

        assert first.retention_days == 7
        assert get_config() is first

    def test_set_config_overrides(self):
        config = AuditConfig(enabled=False)

        set_config(config)

        assert get_config() is config

    def test_reset_config_rereads_environment(self, monkeypatch):
        set_config(AuditConfig(retention_days=1))
        monkeypatch.setenv("AUDIT_RETENTION_DAYS", "3")

        reset_config()

        assert get_config().retention_days == 3
