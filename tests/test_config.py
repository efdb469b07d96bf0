import pytest

from topgrade.config import Config, ConfigError, load_config_file, read_config
from topgrade.util.paths import BaseDirs, NoBaseDirectories


def test_missing_file_is_empty_config(tmp_path):
    cfg = load_config_file(tmp_path / "topgrade.yaml")
    assert cfg.pre_commands() is None
    assert cfg.commands() is None
    assert cfg.git_repos() is None


def test_commands_keep_order(tmp_path):
    path = tmp_path / "topgrade.yaml"
    path.write_text(
        "commands:\n"
        "  zeta: echo z\n"
        "  alpha: echo a\n"
        "  mid: echo m\n"
        "pre_commands:\n"
        "  sync: git -C ~/dotfiles pull\n"
    )
    cfg = load_config_file(path)
    assert list(cfg.commands()) == ["zeta", "alpha", "mid"]
    assert cfg.pre_commands() == {"sync": "git -C ~/dotfiles pull"}


def test_git_repos_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("SRC", "code")
    cfg = Config.from_dict({"git_repos": ["~/dotfiles", "$HOME/$SRC/tools"]})
    assert cfg.git_repos() == [tmp_path / "dotfiles", tmp_path / "code" / "tools"]


def test_schema_violation(tmp_path):
    path = tmp_path / "topgrade.yaml"
    path.write_text("commands:\n  broken: [1, 2]\n")
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config_file(path)


def test_unknown_key_rejected():
    with pytest.raises(ConfigError):
        Config.from_dict({"comands": {}})


def test_invalid_yaml(tmp_path):
    path = tmp_path / "topgrade.yaml"
    path.write_text("commands: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config_file(path)


def test_read_config_uses_config_dir(tmp_path):
    base = BaseDirs(home_dir=tmp_path, config_dir=tmp_path / "cfg")
    base.config_dir.mkdir()
    (base.config_dir / "topgrade.yaml").write_text("git_repos: []\n")
    assert read_config(base).git_repos() == []


def test_base_dirs_xdg(tmp_path, monkeypatch):
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    dirs = BaseDirs.detect()
    assert dirs.home_dir == tmp_path
    assert dirs.config_dir == tmp_path / "xdg"


def test_base_dirs_without_home(monkeypatch):
    def no_home():
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr("pathlib.Path.home", staticmethod(no_home))
    with pytest.raises(NoBaseDirectories):
        BaseDirs.detect()
