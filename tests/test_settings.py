from pathlib import Path

import pytest

from motor_sysid.config.settings import LoggingSettings, SysIdSettings
from motor_sysid.research.regression import ModelSpec


def test_bundled_defaults(monkeypatch):
    monkeypatch.delenv("SYSID_STATIC_FRICTION", raising=False)
    monkeypatch.delenv("SYSID_ACCELERATION", raising=False)

    s = SysIdSettings.load()
    assert s.model.to_spec() == ModelSpec(True, True)
    assert s.export.precision == 6
    assert s.export.path is None
    assert s.logging.log_dir == "logs"
    assert s.logging.level_no == 20
    assert s.acceleration_history == 10


def test_user_file(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("SYSID_STATIC_FRICTION", raising=False)
    monkeypatch.delenv("SYSID_ACCELERATION", raising=False)

    cfg = tmp_path / "sysid.yaml"
    cfg.write_text(
        "model:\n"
        "  include_static_friction: false\n"
        "  include_acceleration: true\n"
        "export:\n"
        "  precision: 3\n"
        "  path: out.csv\n"
        "logging:\n"
        "  level: DEBUG\n"
    )

    s = SysIdSettings.load(cfg)
    assert s.model.to_spec() == ModelSpec(False, True)
    assert s.export.precision == 3
    assert s.export.path == "out.csv"
    assert s.logging.level_no == 10
    assert s.logging.log_dir == "logs"


def test_empty_file_gives_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("SYSID_STATIC_FRICTION", raising=False)
    monkeypatch.delenv("SYSID_ACCELERATION", raising=False)
    cfg = tmp_path / "empty.yaml"
    cfg.write_text("")
    assert SysIdSettings.load(cfg) == SysIdSettings()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SYSID_STATIC_FRICTION", "off")
    monkeypatch.setenv("SYSID_ACCELERATION", "no")
    s = SysIdSettings.load()
    assert s.model.to_spec() == ModelSpec(False, False)


def test_unrecognized_env_value_keeps_file_value(monkeypatch):
    monkeypatch.setenv("SYSID_STATIC_FRICTION", "maybe")
    monkeypatch.delenv("SYSID_ACCELERATION", raising=False)
    assert SysIdSettings.load().model.include_static_friction is True


def test_empty_sections_give_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("SYSID_STATIC_FRICTION", raising=False)
    monkeypatch.delenv("SYSID_ACCELERATION", raising=False)
    cfg = tmp_path / "blank_sections.yaml"
    cfg.write_text("model:\nexport:\nlogging:\nacceleration_history:\n")
    assert SysIdSettings.load(cfg) == SysIdSettings()


def test_unknown_log_level_rejected(tmp_path: Path):
    cfg = tmp_path / "bad_level.yaml"
    cfg.write_text("logging:\n  level: LOUD\n")
    with pytest.raises(ValueError, match="unknown log level 'LOUD'"):
        SysIdSettings.load(cfg)


def test_log_level_normalized(tmp_path: Path):
    cfg = tmp_path / "levels.yaml"
    cfg.write_text("logging:\n  level: warning\n")
    s = SysIdSettings.load(cfg)
    assert s.logging.level == "WARNING"
    assert s.logging.level_no == 30
    assert LoggingSettings(level=15).level_no == 15
