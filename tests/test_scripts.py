"""Development script tests."""
from scripts import run_dev


def test_run_dev_binds_to_configured_address(monkeypatch, env_settings):
    env_settings(HOST="0.0.0.0", PORT=9001)
    calls = []
    monkeypatch.setattr(run_dev.uvicorn, "run", lambda app, **options: calls.append((app, options)))

    run_dev.main()

    app, options = calls[0]
    assert app == "classroom.app:app"
    assert (options["host"], options["port"]) == ("0.0.0.0", 9001)
    assert options["reload"] is False
