# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from course_digest.config import Predegree, ScraperConfig, load_config, load_predegrees


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("base_url: http://example.com/\nyears_per_degree: 2", ".yaml", None),
        (json.dumps({"base_url": "http://example.com", "years_per_degree": 2}), ".json", None),
        ("years_per_degree: 0", ".yaml", ValidationError),
        ("unknown_key: 1", ".yaml", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("{broken", ".json", ValueError),
        ("[]", ".yaml", TypeError),
        ("false", ".yaml", TypeError),
        ("0", ".yaml", TypeError),
        ("[]", ".json", TypeError),
        ("false", ".json", TypeError),
        ("base_url = 'x'", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, ScraperConfig)
        assert cfg.base_url == "http://example.com"
        assert cfg.years_per_degree == 2


def test_load_config_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = load_config(None)
    assert cfg.base_url == "https://corsi.unibo.it"
    assert cfg.output_dir == Path("output")
    assert cfg.degrees_path == Path("config/degrees.json")
    assert cfg.years_per_degree == 3


def test_load_config_uses_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("output_dir: build/docs\n", encoding="utf-8")
    assert load_config(None).output_dir == Path("build/docs")


def test_load_config_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_config_is_frozen():
    cfg = ScraperConfig()
    with pytest.raises(ValidationError):
        cfg.rate_limit = 3.0


def test_load_predegrees(degrees_file):
    predegrees = load_predegrees(degrees_file)
    assert predegrees[0] == Predegree(id="informatica", name="Informatica", code="8009/000")
    assert predegrees[1].id == ""


def test_load_predegrees_ignores_extra_keys(tmp_path):
    path = tmp_path / "degrees.json"
    path.write_text('[{"id": "a", "name": "A", "code": "1/0", "years": 3}]', encoding="utf-8")
    assert load_predegrees(path) == [Predegree(id="a", name="A", code="1/0")]


def test_load_predegrees_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_predegrees(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_predegrees(broken)


@pytest.mark.parametrize("content,suffix", [("", ".yaml"), ("null", ".json")])
def test_load_config_empty_document_uses_defaults(tmp_path, content, suffix):
    cfg = load_config(write_file(tmp_path, content, suffix))
    assert cfg == ScraperConfig()
