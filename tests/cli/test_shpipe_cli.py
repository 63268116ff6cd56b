"""CLI tests for the run and expand commands.

Output of an uncaptured terminal stage goes to the real stdout, not to the
Click runner, so tests that check output use --capture.
"""


def test_run_capture(invoke):
    result = invoke(["run", "--capture", "echo", "hi"])
    assert result.exit_code == 0
    assert result.output == "hi\n"


def test_run_capture_pipeline(invoke):
    """Separators are passed as ordinary arguments."""
    result = invoke(["run", "--capture", "echo", "hello", "|", "wc", "-c"])
    assert result.exit_code == 0
    assert result.output.strip() == "6"


def test_run_exit_code(invoke):
    """The CLI exits with the last stage's status."""
    result = invoke(["run", "sh", "-c", "exit 3"])
    assert result.exit_code == 3


def test_run_options_after_double_dash(invoke):
    result = invoke(["run", "--", "sh", "-c", "exit 5"])
    assert result.exit_code == 5


def test_run_empty_capture_prints_nothing(invoke):
    result = invoke(["run", "--capture", "true"])
    assert result.exit_code == 0
    assert result.output == ""


def test_run_missing_program(invoke):
    result = invoke(["run", "shpipe-test-no-such-program"])
    assert result.exit_code == 127
    assert "cannot execute" in result.output


def test_run_killed_by_signal(invoke):
    result = invoke(["run", "sh", "-c", "kill -KILL $$"])
    assert result.exit_code == 1
    assert "terminated abnormally" in result.output


def test_run_cd_failure(invoke, tmp_path):
    result = invoke(["run", "cd", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert "Error: cd:" in result.output


def test_run_requires_command(invoke):
    result = invoke(["run"])
    assert result.exit_code == 2


def test_run_expands_wildcards(invoke, glob_dir):
    result = invoke(["run", "--capture", "ls", "*.txt"])
    assert result.exit_code == 0
    assert result.output == "a.txt\nb.txt\n"


def test_run_no_glob(invoke, glob_dir):
    result = invoke(["--no-glob", "run", "--capture", "echo", "*.txt"])
    assert result.output == "*.txt\n"


def test_run_no_glob_from_env(invoke, glob_dir, monkeypatch):
    monkeypatch.setenv("SHPIPE_NO_GLOB", "1")
    result = invoke(["run", "--capture", "echo", "*.txt"])
    assert result.output == "*.txt\n"


def test_separator_match_leading(invoke):
    """By default an argument starting with '|' ends the stage."""
    result = invoke(["run", "--capture", "echo", "a", "|b", "tr", "a", "z"])
    assert result.output == "z\n"


def test_separator_match_token(invoke):
    result = invoke(
        ["--separator-match", "token", "run", "--capture", "echo", "|b"]
    )
    assert result.exit_code == 0
    assert result.output == "|b\n"


def test_invalid_separator_match_in_env(invoke, monkeypatch):
    monkeypatch.setenv("SHPIPE_SEPARATOR_MATCH", "sometimes")
    result = invoke(["run", "true"])
    assert result.exit_code == 2


def test_terminal_only(invoke):
    result = invoke(
        ["--terminal-only", "run", "true", "|", "sh", "-c", "exit 4"]
    )
    assert result.exit_code == 4


def test_verbose(invoke):
    result = invoke(["-v", "run", "--capture", "echo", "hi"])
    assert result.exit_code == 0
    assert "Running: echo hi" in result.output


def test_expand(invoke, glob_dir):
    result = invoke(["expand", "*.txt", "sub/*"])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["a.txt", "b.txt", "sub/d.txt"]


def test_expand_terminator(invoke, glob_dir):
    result = invoke(["expand", "*.log", "--", "*.txt"])
    assert result.output.splitlines() == ["c.log", "*.txt"]


def test_expand_braces_and_no_match(invoke, glob_dir):
    result = invoke(["expand", "{a,b}.txt", "*.none"])
    assert result.output.splitlines() == ["a.txt", "b.txt", "*.none"]


def test_expand_no_glob(invoke, glob_dir):
    result = invoke(["--no-glob", "expand", "*.txt"])
    assert result.output == "*.txt\n"
