"""Command line entry points."""
import pytest

from hello_server import probe, server


@pytest.fixture(autouse=True)
def keep_signal_handlers(monkeypatch):
    monkeypatch.setattr(server.signal, "signal", lambda *args: None)


def test_server_exits_nonzero_on_busy_port(running_server, capsys):
    code = server.main(["--host", "localhost", "--port", str(running_server.port)])
    assert code == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: cannot bind localhost:")


def test_server_exits_nonzero_on_invalid_port(capsys):
    assert server.main(["--port", "0"]) == 1
    assert "port must be in 1..65535" in capsys.readouterr().err


def test_server_rejects_non_integer_port():
    with pytest.raises(SystemExit) as excinfo:
        server.main(["--port", "http"])
    assert excinfo.value.code == 2


def test_probe_passes_against_server(running_server, capsys):
    code = probe.main(["--url", running_server.url, "--requests", "3", "--interval", "0"])
    assert code == 0
    assert "3 (100.0%)" in capsys.readouterr().err


def test_probe_fails_without_server(unused_port, capsys):
    url = f"http://127.0.0.1:{unused_port}"
    code = probe.main(["--url", url, "--requests", "1", "--timeout", "500"])
    assert code == 1
    assert "ERROR" in capsys.readouterr().err


def test_checker_rejects_invalid_method(capsys):
    with pytest.raises(SystemExit) as excinfo:
        probe.main(["--method", "GE T", "--requests", "1"])
    assert excinfo.value.code == 2
    assert "invalid HTTP method" in capsys.readouterr().err
