from __future__ import annotations

import io

import pytest

from pydfa.cli import build_parser, get_version, main


def _run(argv: list[str], stdin_text: str = "") -> tuple[int, list[str]]:
    stdout = io.StringIO()
    code = main(argv, stdin=io.StringIO(stdin_text), stdout=stdout)
    return code, stdout.getvalue().splitlines()


def test_execute_option_runs_commands(tmp_path) -> None:
    code, lines = _run(
        [
            "--work-dir",
            str(tmp_path),
            "-e",
            "SYMBOLS a b; STATES s0 s1",
            "-e",
            "FINAL-STATES s1",
            "-e",
            "TRANSITIONS a s0 s1, b s1 s1;",
            "-e",
            "EXECUTE ab",
        ]
    )
    assert code == 0
    assert lines == ["S0 S1 S1 YES"]


def test_script_file_then_commands(tmp_path) -> None:
    script = tmp_path / "model.txt"
    script.write_text("SYMBOLS 0 1;\nSTATES even odd;\nFINAL-STATES even;\n"
                      "TRANSITIONS 0 even even, 1 even odd, 0 odd odd, 1 odd even;\n")

    code, lines = _run(["--work-dir", str(tmp_path), "model.txt", "-e", "EXECUTE 101"])

    assert code == 0
    assert lines == ["EVEN ODD ODD EVEN YES"]


def test_snapshot_file_argument(tmp_path) -> None:
    _run(["--work-dir", str(tmp_path), "-e", "STATES s0; SYMBOLS a; TRANSITIONS a s0 s0; COMPILE m.fsm"])

    code, lines = _run(["--work-dir", str(tmp_path), "m.fsm", "-e", "EXECUTE aa"])

    assert code == 0
    assert lines[-1] == "S0 S0 S0 NO"


def test_repl_reads_until_exit(tmp_path) -> None:
    stdin_text = "SYMBOLS a;\nSTATES s0\n  s1;\nTRANSITIONS a s0 s1;\nEXECUTE a;\nEXIT;\nEXECUTE a;\n"

    code, lines = _run(["--work-dir", str(tmp_path)], stdin_text)

    assert code == 0
    output = "\n".join(lines)
    assert f"pydfa {get_version()}" in lines[0]
    assert "S0 S1 NO" in output
    assert "TERMINATED BY USER" in output
    assert output.count("S0 S1 NO") == 1


def test_repl_end_of_input(tmp_path) -> None:
    code, lines = _run(["--work-dir", str(tmp_path)], "STATES s0;\n")
    assert code == 0
    assert lines[0].startswith("pydfa ")


def test_repl_reports_line_numbers(tmp_path) -> None:
    _, lines = _run(["--work-dir", str(tmp_path)], "STATES s0;\n\nBOGUS;\n")
    assert any("line 3" in line for line in lines)


class _InterruptedInput:
    """stdin that raises KeyboardInterrupt once, after the given lines."""

    def __init__(self, before: list[str], after: list[str]) -> None:
        self._lines = before + [None] + after

    def readline(self) -> str:
        if not self._lines:
            return ""
        line = self._lines.pop(0)
        if line is None:
            raise KeyboardInterrupt
        return line


def test_repl_interrupt_discards_pending_command(tmp_path) -> None:
    stdin = _InterruptedInput(
        ["SYMBOLS a;\n", "STATES s0\n"],
        ["STATES s1;\n", "STATES;\n", "EXIT;\n"],
    )
    stdout = io.StringIO()

    code = main(["--work-dir", str(tmp_path)], stdin=stdin, stdout=stdout)

    assert code == 0
    output = stdout.getvalue()
    assert "STATES S1\n" in output
    assert "S0" not in output
    assert "TERMINATED BY USER" in output


def test_log_option(tmp_path) -> None:
    code, _ = _run(["--work-dir", str(tmp_path), "--log", "run.log", "-e", "STATES s0", "-e", "STATES"])

    assert code == 0
    log_lines = (tmp_path / "run.log").read_text().splitlines()
    assert log_lines == ["? STATES s0", "? STATES", "STATES S0"]


def test_exit_in_commands_stops(tmp_path) -> None:
    code, lines = _run(["--work-dir", str(tmp_path), "-e", "EXIT", "-e", "STATES"])
    assert code == 0
    assert lines == ["TERMINATED BY USER"]


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--version"])
    assert excinfo.value.code == 0
    assert get_version() in capsys.readouterr().out
