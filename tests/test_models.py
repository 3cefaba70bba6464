"""Tests for core domain models (core/models.py)."""

from __future__ import annotations

import dataclasses

import pytest

from envkeep.core.models import AppConfig, BatchReport, CredentialEntry
from envkeep.exceptions import BackendError


class TestCredentialEntry:
    def test_as_line(self) -> None:
        assert CredentialEntry("API_KEY", "a=b c").as_line() == "API_KEY=a=b c"

    def test_repr_hides_value(self) -> None:
        assert "s3cr3t" not in repr(CredentialEntry("API_KEY", "s3cr3t"))

    def test_is_frozen(self) -> None:
        entry = CredentialEntry("A", "1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.value = "2"  # type: ignore[misc]


class TestBatchReport:
    def test_clean_report(self) -> None:
        report = BatchReport(written=("A", "B"))
        assert report.ok
        assert len(report) == 2

    def test_failures_are_counted(self) -> None:
        report = BatchReport(written=("A",), failed=(("B", BackendError("locked")),))
        assert not report.ok
        assert len(report) == 2


def test_app_config_fields() -> None:
    config = AppConfig(username="alice", package_name="envkeep")
    assert (config.username, config.package_name) == ("alice", "envkeep")
