import pathlib
import pytest

import asmmap.core.logger

@pytest.fixture(name="log", scope="function")
def fixture_log() -> asmmap.core.logger.RootDiagnosticsLogger:
    return asmmap.core.logger.create_root_diagnostics_logger()

@pytest.fixture(scope="function")
def mock_user_home(tmp_path_factory, monkeypatch) -> pathlib.Path:
    result = tmp_path_factory.mktemp("mock_user_home")
    monkeypatch.setenv("HOME", str(result))
    def mock_home_func():
        return result
    monkeypatch.setattr(pathlib.Path, "home", mock_home_func)
    return result

@pytest.fixture(scope="function")
def tmp_xdg_config_home(tmp_path_factory, monkeypatch) -> pathlib.Path:
    result = tmp_path_factory.mktemp("tmp_xdg_config_home")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(result))
    return result

@pytest.fixture(scope="function")
def no_user_config(mock_user_home: pathlib.Path, monkeypatch) -> pathlib.Path:
    # clear XDG_CONFIG_HOME, set up empty mocked user home directory
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    return mock_user_home
