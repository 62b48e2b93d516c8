from pathlib import Path

from photolibrary.common.settings import get_settings


def test_defaults_follow_cache_root(tmp_path):
    cfg = get_settings()
    assert cfg.cache_root == tmp_path / "cache"
    assert cfg.thumbnails_root == tmp_path / "cache" / "thumbnails"
    assert cfg.files_root == tmp_path / "cache" / "files"
    assert cfg.database_url == f"sqlite:///{tmp_path / 'cache' / 'library.db'}"
    # settings never create directories
    assert not cfg.cache_root.exists()


def test_library_and_picker_thumbnail_defaults():
    cfg = get_settings()
    assert (cfg.thumbnail_width, cfg.thumbnail_height, cfg.thumbnail_quality) == (512, 384, 0.5)
    assert (cfg.pick_thumbnail_width, cfg.pick_thumbnail_height, cfg.pick_thumbnail_quality) == (256, 256, 0.7)


def test_nested_env_overrides(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("CONCURRENCY__MAX_WORKERS", "3")
    monkeypatch.setenv("AUTH__STATE", "denied")
    monkeypatch.setenv("DB__URL", "sqlite://")
    monkeypatch.setenv("PUBLIC_BASE_URL", "http://localhost:8000/cache")

    cfg = get_settings()
    assert cfg.concurrency.max_workers == 3
    assert cfg.auth.state == "denied"
    assert cfg.database_url == "sqlite://"
    assert cfg.public_base_url == "http://localhost:8000/cache"


def test_settings_are_cached():
    assert get_settings() is get_settings()
    assert isinstance(get_settings().cache_root, Path)
