# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from site_audit.config import AuditConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("base_url: http://example.com\nmax_pages: 3", ".yaml", None),
        (json.dumps({"base_url": "http://example.com", "max_depth": 1}), ".json", None),
        ("{}", ".json", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("base_url: http://example.com\nunknown_key: 1", ".yaml", ValidationError),
        ("base_url: http://example.com\nmax_pages: 0", ".yaml", ValidationError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, AuditConfig)
        assert cfg.entry_url.rstrip("/") == "http://example.com"


def test_defaults():
    cfg = AuditConfig(base_url="https://example.com/")
    assert cfg.max_pages == 8
    assert cfg.max_depth == 2
    assert cfg.axe_tags == ["wcag2a", "wcag2aa"]
    assert cfg.css_max_length == 800_000
    assert cfg.report_dir == Path("reports")


def test_fragment_stripped_from_base_url():
    cfg = AuditConfig(base_url="https://example.com/docs#intro")
    assert cfg.entry_url == "https://example.com/docs"


def test_config_is_frozen():
    cfg = AuditConfig(base_url="https://example.com/")
    with pytest.raises(ValidationError):
        cfg.max_pages = 3


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_unsupported_suffix(tmp_path):
    cfg_path = write_file(tmp_path, "base_url = 'x'", ".toml")
    with pytest.raises(ValueError):
        load_config(cfg_path)


def test_axe_script_not_found(tmp_path):
    cfg_path = write_file(
        tmp_path, "base_url: http://example.com\naxe_script_path: missing/axe.min.js", ".yaml"
    )
    with pytest.raises(FileNotFoundError):
        load_config(cfg_path)


def test_axe_script_found(tmp_path):
    script = tmp_path / "axe.min.js"
    script.write_text("window.axe = {};", encoding="utf-8")
    cfg = AuditConfig(base_url="http://example.com", axe_script_path=script)
    assert cfg.axe_script_path == script
