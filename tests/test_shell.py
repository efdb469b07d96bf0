import sys
from unittest.mock import MagicMock, patch

import pytest

from topgrade.util.shell import run_cmd, which


@pytest.mark.skipif(sys.platform == "win32", reason="posix shell")
def test_run_cmd_success(tmp_path):
    res = run_cmd("echo 'hello'", tmp_path, capture=True)
    assert res.returncode == 0
    assert res.ok
    assert "hello" in res.stdout
    assert res.elapsed_s >= 0


@pytest.mark.skipif(sys.platform == "win32", reason="posix shell")
def test_run_cmd_failure(tmp_path):
    res = run_cmd("false", tmp_path)
    assert res.returncode != 0
    assert res.stdout is None


def test_run_cmd_list_mode(tmp_path):
    """A list argument runs with shell=False."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout=None)

        cmd = ["ls", "-l"]
        run_cmd(cmd, tmp_path)

        args, kwargs = mock_run.call_args
        assert args[0] == cmd
        assert kwargs["shell"] is False
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["stdout"] is None


def test_run_cmd_return_code_passthrough():
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=3, stdout=None)
        res = run_cmd(["env"])
        assert mock_run.call_args.kwargs["cwd"] is None
        assert mock_run.call_args.kwargs["errors"] == "replace"
        assert res.returncode == 3


def test_run_cmd_unexpected_exception_is_failure(tmp_path):
    with patch("subprocess.run", side_effect=ValueError("bad argument")):
        res = run_cmd(["ls"], tmp_path, capture=True)
    assert res.returncode == 1
    assert res.stdout is None


@pytest.mark.skipif(sys.platform == "win32", reason="posix shell")
def test_run_cmd_undecodable_output(tmp_path):
    res = run_cmd("printf '\\377\\376ok'", tmp_path, capture=True)
    assert res.returncode == 0
    assert res.stdout.endswith("ok")
    assert "�" in res.stdout


@pytest.mark.skipif(sys.platform == "win32", reason="posix permissions")
def test_which(tmp_path, monkeypatch):
    tool = tmp_path / "mytool"
    tool.write_text("#!/bin/sh\n")
    tool.chmod(0o755)
    (tmp_path / "notexec").write_text("")
    monkeypatch.setenv("PATH", str(tmp_path))
    assert which("mytool") == str(tool)
    assert which("notexec") is None
    assert which("missing") is None
