"""Settings — MF_ environment prefix, URL normalization, instance id."""

from gui.config import Settings, get_settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.gui_port == 9090
    assert s.things_url == "http://localhost:9000"
    assert s.verification_tls is False


def test_env_prefix_and_trailing_slash(monkeypatch):
    monkeypatch.setenv("MF_USERS_URL", "https://users.example/")
    monkeypatch.setenv("MF_GUI_PORT", "8080")

    s = Settings(_env_file=None)

    assert s.users_url == "https://users.example"
    assert s.gui_port == 8080


def test_instance_id_generated_when_unset(monkeypatch):
    monkeypatch.delenv("MF_UI_INSTANCE_ID", raising=False)

    first = Settings(_env_file=None)
    second = Settings(_env_file=None)

    assert first.ui_instance_id
    assert first.ui_instance_id != second.ui_instance_id


def test_instance_id_from_env_is_kept(monkeypatch):
    monkeypatch.setenv("MF_UI_INSTANCE_ID", "gui-1")
    assert Settings(_env_file=None).ui_instance_id == "gui-1"


def test_get_settings_keeps_one_instance_id():
    get_settings.cache_clear()
    try:
        assert get_settings().ui_instance_id == get_settings().ui_instance_id
    finally:
        get_settings.cache_clear()


def test_sdk_timeout_from_env(monkeypatch):
    monkeypatch.setenv("MF_SDK_TIMEOUT", "5")
    assert Settings(_env_file=None).sdk_timeout == 5.0


def test_no_redirect_url_setting():
    assert "gui_redirect_url" not in Settings.model_fields
