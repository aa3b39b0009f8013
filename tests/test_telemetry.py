from __future__ import annotations

import pytest

from dsv_engine.runtime import telemetry


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="chatty")


def test_configure_rejects_config_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="quiet")


def test_loggers_are_cached_until_reconfigured() -> None:
    first = telemetry.get_logger("dsv_engine.test")
    assert telemetry.get_logger("dsv_engine.test") is first

    telemetry.configure(preset="quiet")

    assert telemetry.get_logger("dsv_engine.test") is not first


def test_span_collects_metadata_and_reraises() -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("table::test", component=True, metadata={"row": 1}) as handle:
            handle.add_metadata("column", 2)
            assert handle.metadata == {"row": "1", "column": "2"}
            assert handle.component_name == "table::test"
            raise RuntimeError("boom")


def test_record_event_rejects_unknown_level() -> None:
    telemetry.record_event("table.noop", level="debug", data={"operation": "paste"})
    with pytest.raises(ValueError):
        telemetry.record_event("table.noop", level="loud")
