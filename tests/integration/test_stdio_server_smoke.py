from __future__ import annotations

import io
import os
import sys
from pathlib import Path

import pytest

from arabica.server import LoopState, create_server


def test_select_on_empty_index_prints_blank_line(tmp_path: Path, no_git) -> None:
    server = create_server(work_dir=tmp_path, runner=no_git, err_stream=io.StringIO())
    in_stream = io.StringIO("select Foo\n\n   \nexit\nselect Bar\n")
    out_stream = io.StringIO()

    state = server.serve(in_stream=in_stream, out_stream=out_stream)

    assert state is LoopState.TERMINATED
    assert out_stream.getvalue() == "\n"


def test_end_of_input_terminates(tmp_path: Path, no_git) -> None:
    server = create_server(work_dir=tmp_path, runner=no_git, err_stream=io.StringIO())

    state = server.serve(in_stream=io.StringIO("select Foo"), out_stream=io.StringIO())

    assert state is LoopState.TERMINATED


def test_handle_line_state_transitions(tmp_path: Path, no_git) -> None:
    server = create_server(work_dir=tmp_path, runner=no_git, err_stream=io.StringIO())
    out_stream = io.StringIO()

    assert server.handle_line("", out_stream) is LoopState.RUNNING
    assert server.handle_line("  exit  \n", out_stream) is LoopState.TERMINATED
    assert server.handle_line("exit now", out_stream) is LoopState.RUNNING
    assert server.handle_line("frobnicate x y", out_stream) is LoopState.RUNNING
    assert server.handle_line("index", out_stream) is LoopState.RUNNING
    assert server.handle_line("select", out_stream) is LoopState.RUNNING
    assert out_stream.getvalue() == ""


def test_startup_reports_fallback_and_missing_database(tmp_path: Path, no_git) -> None:
    err_stream = io.StringIO()

    server = create_server(work_dir=tmp_path, runner=no_git, err_stream=err_stream)

    messages = err_stream.getvalue().splitlines()
    database = tmp_path.resolve() / ".git" / "arabica.db"
    assert server.database_location.path == database
    assert server.database_location.fallback is True
    assert messages[0] == (
        f"command ['git', 'rev-parse', '--show-toplevel'] exited with status=128; "
        f"storing index at {database}"
    )
    assert messages[1] == f"error reading {database}: file does not exist"
    assert not (tmp_path / ".git").exists()


def test_main_serves_stdio_until_exit(tmp_path: Path, make_jar, monkeypatch) -> None:
    from arabica import server as server_module

    make_jar(tmp_path / "lib.jar", ["org/Bar.class"])
    monkeypatch.chdir(tmp_path)
    stdin = io.StringIO("index lib.jar\nselect Bar\nexit\n")
    monkeypatch.setattr(server_module.sys, "stdin", stdin)
    stdout = io.StringIO()
    monkeypatch.setattr(server_module.sys, "stdout", stdout)
    monkeypatch.setattr(server_module.sys, "stderr", io.StringIO())

    exit_code = server_module.main(["--database", str(tmp_path / "state" / "arabica.db")])

    assert exit_code == 0
    assert stdout.getvalue().splitlines()[-1] == "org.Bar"
    assert (tmp_path / "state" / "arabica.db").is_file()


def test_select_outside_repository_leaves_no_state_directory(tmp_path: Path, no_git) -> None:
    server = create_server(work_dir=tmp_path, runner=no_git, err_stream=io.StringIO())

    server.serve(in_stream=io.StringIO("select Foo\nfrobnicate\nexit\n"), out_stream=io.StringIO())

    assert not (tmp_path / ".git").exists()


@pytest.mark.skipif(os.name == "nt", reason="POSIX paths may hold arbitrary bytes")
def test_git_toplevel_with_undecodable_bytes_still_starts(tmp_path: Path) -> None:
    fake_git = tmp_path / "fake_git.py"
    toplevel = os.fsencode(tmp_path) + b"/repo-\xff"
    fake_git.write_text(
        f"import sys\nsys.stdout.buffer.write({toplevel!r} + b'\\n')\n", encoding="utf-8"
    )
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    (work_dir / "arabica.toml").write_text(
        f"[project]\ngit_command = ['{sys.executable}', '{fake_git}']\n", encoding="utf-8"
    )
    err_stream = io.StringIO()

    server = create_server(work_dir=work_dir, err_stream=err_stream)

    location = server.database_location
    assert location.fallback is False
    assert location.path.parent.parent == Path(os.fsdecode(toplevel))
    assert "error reading" in err_stream.getvalue()
