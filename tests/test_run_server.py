import importlib.util
from pathlib import Path

import uvicorn

from homecare.config import LOG_LEVEL, SERVER_HOST, SERVER_PORT, SERVER_RELOAD

RUN_SERVER_PATH = Path(__file__).resolve().parent.parent / "run_server.py"


def load_run_server():
    spec = importlib.util.spec_from_file_location("run_server", RUN_SERVER_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_main_starts_uvicorn_with_the_app(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    load_run_server().main()

    assert calls == [
        (
            "homecare.main:app",
            {
                "host": SERVER_HOST,
                "port": SERVER_PORT,
                "reload": SERVER_RELOAD,
                "log_level": LOG_LEVEL.lower(),
            },
        )
    ]
