import json
import sys

import pytest

from composerkit.satis import SatisCommands, SatisConfig


def make_composer(tmp_path, output=""):
    log = tmp_path / "calls.jsonl"
    script = tmp_path / "fake-composer"
    script.write_text(
        f"#!{sys.executable}\n"
        "import json, sys\n"
        f"with open({str(log)!r}, 'a', encoding='utf-8') as fh:\n"
        "    fh.write(json.dumps(sys.argv[1:]) + '\\n')\n"
        f"sys.stdout.write({output!r})\n",
        encoding="utf-8",
    )
    script.chmod(0o755)
    return SatisCommands(executable_path=str(script)), log


def read(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "conf" / "satis.json"
    SatisCommands().create_satis_config(str(path), "acme/repo", "https://packages.example.com")
    return path


def test_create_satis_config(config_path):
    data = read(config_path)
    assert data == {
        "name": "acme/repo",
        "homepage": "https://packages.example.com",
        "repositories": [],
        "output-dir": "public",
        "require-all": True,
    }


def test_written_file_uses_four_space_indent(config_path):
    text = config_path.read_text(encoding="utf-8")
    assert '\n    "name": "acme/repo",' in text
    assert not text.endswith("\n")


def test_add_satis_repository(config_path):
    comp = SatisCommands()
    comp.add_satis_repository(str(config_path), "vcs", "https://git.example.com/a.git")
    comp.add_satis_repository(str(config_path), "composer", "https://repo.example.com")
    assert read(config_path)["repositories"] == [
        {"type": "vcs", "url": "https://git.example.com/a.git"},
        {"type": "composer", "url": "https://repo.example.com"},
    ]


def test_add_repository_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        SatisCommands().add_satis_repository(str(tmp_path / "none.json"), "vcs", "x")


def test_update_satis_stability(config_path):
    SatisCommands().update_satis_stability(str(config_path), "beta")
    assert read(config_path)["minimum-stability"] == "beta"


def test_update_satis_stability_invalid(config_path):
    with pytest.raises(ValueError):
        SatisCommands().update_satis_stability(str(config_path), "unstable")
    assert "minimum-stability" not in read(config_path)


def test_enable_satis_archive_default_format(config_path):
    SatisCommands().enable_satis_archive(str(config_path), "")
    assert read(config_path)["archive"] == {
        "directory": "dist",
        "format": "zip",
        "skip-dev": False,
    }


def test_enable_satis_archive_custom_format(config_path):
    SatisCommands().enable_satis_archive(str(config_path), "tar")
    assert read(config_path)["archive"]["format"] == "tar"


def test_add_satis_require_turns_off_require_all(config_path):
    SatisCommands().add_satis_require(str(config_path), "monolog/monolog", "^2.0")
    data = read(config_path)
    assert data["require"] == {"monolog/monolog": "^2.0"}
    assert "require-all" not in data


def test_build_satis(tmp_path):
    comp, log = make_composer(tmp_path, output="built")
    assert comp.build_satis("satis.json", "") == "built"
    comp.build_satis("satis.json", "out")
    lines = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert lines == [
        ["satis", "build", "satis.json"],
        ["satis", "build", "satis.json", "out"],
    ]


def test_init_satis_default_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = SatisCommands().init_satis("acme/repo", "https://packages.example.com", "")
    assert result is None
    data = read(tmp_path / "satis" / "satis.json")
    assert data["name"] == "acme/repo"
    assert data["output-dir"] == "public"


def test_init_satis_custom_directory(tmp_path):
    target = tmp_path / "custom"
    SatisCommands().init_satis("acme/repo", "https://packages.example.com", str(target))
    assert read(target / "satis.json")["homepage"] == "https://packages.example.com"


def test_round_trip_and_unknown_keys():
    source = {
        "name": "n",
        "homepage": "h",
        "repositories": [{"url": "u", "type": "vcs"}],
        "output-dir": "public",
        "require": {"b/b": "1.0", "a/a": "2.0"},
        "providers": True,
        "unknown": 5,
    }
    config = SatisConfig.from_dict(source)
    data = config.to_dict()
    assert "unknown" not in data
    assert SatisConfig.from_dict(data) == config
    assert list(data["require"]) == sorted(source["require"])


def test_from_dict_rejects_wrong_types():
    with pytest.raises(ValueError):
        SatisConfig.from_dict({"name": 3})
    with pytest.raises(ValueError):
        SatisConfig.from_dict(["not", "an", "object"])