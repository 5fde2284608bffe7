import json
import subprocess
from unittest import mock

import pytest

from composerkit.repository import Repository, RepositoryCommands, RepositoryType

EXE = "/path/to/composer"


class _Recorder:
    def __init__(self, output="", returncode=0):
        self.output = output
        self.returncode = returncode
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append(list(command))
        return subprocess.CompletedProcess(command, self.returncode, stdout=self.output)

    @property
    def args(self):
        return self.calls[-1][1:]


@pytest.fixture
def recorder():
    rec = _Recorder(output="some output\n")
    with mock.patch("composerkit.commands.subprocess.run", rec):
        yield rec


@pytest.fixture
def commands():
    return RepositoryCommands(executable_path=EXE)


def test_repository_type_values():
    assert RepositoryType.VCS.value == "vcs"
    assert RepositoryType("packagist") is RepositoryType.PACKAGIST
    assert {t.value for t in RepositoryType} == {
        "vcs", "composer", "packagist", "path", "artifact", "pear"
    }


def test_to_json_omits_empty_fields():
    repo = Repository(type=RepositoryType.COMPOSER, url="https://composer.example.org")
    assert repo.to_json() == '{"type":"composer","url":"https://composer.example.org"}'


def test_to_json_round_trip_with_options():
    repo = Repository(
        type=RepositoryType.PATH, url="../my-package", name="local",
        options={"symlink": True, "b": 1},
    )
    data = json.loads(repo.to_json())
    assert data == {
        "type": "path", "url": "../my-package", "name": "local",
        "options": {"symlink": True, "b": 1},
    }
    assert list(data) == ["type", "url", "name", "options"]
    assert list(data["options"]) == ["b", "symlink"]


def test_to_json_escapes_html_characters():
    repo = Repository(type="vcs", url="https://example.com/?a=1&b=<2>")
    text = repo.to_json()
    assert "&" not in text and "<" not in text and ">" not in text
    assert json.loads(text)["url"] == "https://example.com/?a=1&b=<2>"


def test_add_repository(recorder, commands):
    repo = Repository(type=RepositoryType.COMPOSER, url="https://composer.example.org")
    assert commands.add_repository("private", repo) is None
    assert recorder.calls[-1][0] == EXE
    assert recorder.args[:2] == ["config", "repositories.private"]
    assert json.loads(recorder.args[2]) == {
        "type": "composer", "url": "https://composer.example.org"
    }


def test_remove_and_list_repositories(recorder, commands):
    assert commands.remove_repository("private") is None
    assert recorder.args == ["config", "--unset", "repositories.private"]
    assert commands.list_repositories() == "some output"
    assert recorder.args == ["config", "repositories"]


def test_add_packagist_repository(recorder, commands):
    assert commands.add_packagist_repository("https://repo.packagist.org") is None
    assert recorder.args[1] == "repositories.packagist.org"
    assert json.loads(recorder.args[2]) == {
        "type": "packagist", "url": "https://repo.packagist.org"
    }


def test_disable_enable_packagist(recorder, commands):
    assert commands.disable_packagist_repository() is None
    assert recorder.args == ["config", "repositories.packagist.org.url", "false"]
    assert commands.enable_packagist_repository() is None
    assert recorder.args == [
        "config", "repositories.packagist.org.url", "https://repo.packagist.org"
    ]


@pytest.mark.parametrize(
    "method, kind",
    [
        ("add_vcs_repository", "vcs"),
        ("add_composer_repository", "composer"),
        ("add_artifact_repository", "artifact"),
    ],
)
def test_typed_repository_helpers(recorder, commands, method, kind):
    result = getattr(commands, method)("my-lib", "https://example.com/vendor/package")
    assert result is None
    assert recorder.args[1] == "repositories.my-lib"
    assert json.loads(recorder.args[2]) == {
        "type": kind, "url": "https://example.com/vendor/package"
    }


def test_add_path_repository_with_options(recorder, commands):
    assert commands.add_path_repository("local", "../my-package", {"symlink": True}) is None
    assert json.loads(recorder.args[2]) == {
        "type": "path", "url": "../my-package", "options": {"symlink": True}
    }


def test_add_path_repository_without_options(recorder, commands):
    assert commands.add_path_repository("local", "../my-package", None) is None
    assert json.loads(recorder.args[2]) == {"type": "path", "url": "../my-package"}


@pytest.mark.parametrize("value", ["dist", "source", "auto"])
def test_set_preferred_install_valid(recorder, commands, value):
    assert commands.set_preferred_install(value) is None
    assert recorder.args == ["config", "preferred-install", value]


def test_set_preferred_install_invalid(recorder, commands):
    with pytest.raises(ValueError, match="invalid preferred-install value"):
        commands.set_preferred_install("bogus")
    assert recorder.calls == []


def test_getters(recorder, commands):
    assert commands.get_preferred_install() == "some output"
    assert recorder.args == ["config", "preferred-install"]
    assert commands.get_minimum_stability() == "some output"
    assert recorder.args == ["config", "minimum-stability"]
    assert commands.get_prefer_stable() == "some output"
    assert recorder.args == ["config", "prefer-stable"]
    assert commands.get_config_parameter("name") == "some output"
    assert recorder.args == ["config", "name"]


def test_set_minimum_stability(recorder, commands):
    assert commands.set_minimum_stability("beta") is None
    assert recorder.args == ["config", "minimum-stability", "beta"]


@pytest.mark.parametrize("flag, expected", [(True, "1"), (False, "0")])
def test_set_prefer_stable(recorder, commands, flag, expected):
    assert commands.set_prefer_stable(flag) is None
    assert recorder.args == ["config", "prefer-stable", expected]


def test_set_and_unset_config(recorder, commands):
    assert commands.set_config_parameter("authors.0.email", "zhangsan@example.com") is None
    assert recorder.args == ["config", "authors.0.email", "zhangsan@example.com"]
    assert commands.unset_config("repositories.old-repo") is None
    assert recorder.args == ["config", "--unset", "repositories.old-repo"]


def test_global_repositories(recorder, commands):
    repo = Repository(type=RepositoryType.COMPOSER, url="https://composer.example.org")
    assert commands.add_global_repository("global-private", repo) is None
    assert recorder.args[:3] == ["config", "--global", "repositories.global-private"]
    assert json.loads(recorder.args[3])["type"] == "composer"
    assert commands.remove_global_repository("global-private") is None
    assert recorder.args == [
        "config", "--global", "--unset", "repositories.global-private"
    ]
    assert commands.list_global_repositories() == "some output"
    assert recorder.args == ["config", "--global", "repositories"]


def test_command_failure_raises(commands):
    failing = _Recorder(output="boom", returncode=1)
    with mock.patch("composerkit.commands.subprocess.run", failing):
        with pytest.raises(subprocess.CalledProcessError) as info:
            commands.remove_repository("private")
    assert info.value.output == "boom"