import logging

import pytest

import mediadrop.main as main_module
from mediadrop.core.logging import ACCESS_LOGGER, JsonFormatter


ENV_KEYS = ("TMP_DIR", "PORT", "HOST", "LOG_LEVEL", "LOG_JSON", "UPLOAD_ERROR_STATUS")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # set first so teardown removes whatever the .env load leaves behind
    for name in ENV_KEYS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    access = logging.getLogger(ACCESS_LOGGER)
    saved = (list(root.handlers), root.level, list(access.handlers), access.level, access.propagate)
    yield
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    access.handlers[:] = saved[2]
    access.setLevel(saved[3])
    access.propagate = saved[4]


@pytest.fixture
def served(monkeypatch):
    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


def test_dotenv_configures_logging_and_server(clean_env, restore_logging, served):
    upload_dir = clean_env / "uploads"
    upload_dir.mkdir()
    (clean_env / ".env").write_text(
        f"TMP_DIR={upload_dir}\nPORT=9123\nLOG_LEVEL=DEBUG\nLOG_JSON=true\n", encoding="utf-8"
    )

    main_module.main()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)
    assert not logging.getLogger(ACCESS_LOGGER).propagate

    (app, kwargs), = served
    assert app.state.settings.tmp_dir == str(upload_dir)
    assert kwargs["port"] == 9123
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["access_log"] is False


def test_missing_tmp_dir_exits_non_zero(clean_env, restore_logging, served):
    with pytest.raises(SystemExit) as info:
        main_module.main()
    assert info.value.code == 1
    assert served == []
