import json
import pytest
from bitflag.system.settings import Settings, SettingsData
from bitflag.core.errors import UnknownFlag, ValidationError

def test_defaults_when_file_missing(tmp_path):
    settings = Settings.load(tmp_path / "missing.json")
    assert settings.data == SettingsData()
    assert settings.data.strict

def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "settings.json"
    settings = Settings(SettingsData(), path)
    settings.update(unknown_flags="ignore", width=16)
    settings.save()
    loaded = Settings.load(path)
    assert loaded.data.unknown_flags == "ignore"
    assert loaded.data.width == 16
    assert not loaded.data.strict

def test_invalid_values_normalized(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"unknown_flags": "explode", "width": -3, "log_level": "LOUD", "extra": 1}))
    data = Settings.load(path).data
    assert data == SettingsData()

def test_corrupt_file_falls_back_to_defaults(tmp_path, capsys):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    settings = Settings.load(path)
    assert settings.data == SettingsData()
    assert "Failed to parse settings" in capsys.readouterr().err

def test_env_var_selects_settings_file(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"width": 8}))
    monkeypatch.setenv("BITFLAG_SETTINGS", str(path))
    assert Settings.load().data.width == 8

def test_update_rejects_bad_input(tmp_path):
    settings = Settings(SettingsData(), tmp_path / "s.json")
    with pytest.raises(ValidationError):
        settings.update(colour="blue")
    with pytest.raises(ValidationError):
        settings.update(width=0)
    assert settings.data.width == 64

def test_new_flagset_follows_policy(tmp_path):
    settings = Settings(SettingsData(unknown_flags="ignore", width=8), tmp_path / "s.json")
    flags = settings.new_flagset(0x1FF, {"a": 1})
    assert flags.to_int() == 0xFF
    assert flags.get("missing") is False
    strict = Settings(SettingsData(), tmp_path / "s.json").new_flagset(0, {"a": 1})
    with pytest.raises(UnknownFlag):
        strict.get("missing")
