import sys

from trendscan import cli_entrypoints


def test_scan_forwards_arguments(monkeypatch):
    """The console script should call scan_trends.py with the same arguments."""
    called_cmd = {}

    def fake_run(cmd, check=False):  # noqa: D401
        """Fake subprocess.run that records the command."""
        called_cmd["value"] = cmd
        called_cmd["check"] = check

    monkeypatch.setattr(cli_entrypoints, "run", fake_run)

    cli_entrypoints.scan(["--input", "mentions.csv", "--region", "US"])

    cmd = called_cmd["value"]
    assert cmd[0] == sys.executable
    assert cmd[1].endswith("scan_trends.py")
    assert cmd[2:] == ["--input", "mentions.csv", "--region", "US"]
    assert called_cmd["check"] is True


def test_sessions_uses_process_arguments(monkeypatch):
    called_cmd = {}
    monkeypatch.setattr(cli_entrypoints, "run", lambda cmd, check=False: called_cmd.setdefault("value", cmd))
    monkeypatch.setattr(sys, "argv", ["trend-sessions", "--list"])

    cli_entrypoints.sessions()

    assert called_cmd["value"][1].endswith("session_manager.py")
    assert called_cmd["value"][2:] == ["--list"]
