"""配置加载测试"""

import pytest

from snippet_reviewer.config import (
    DEFAULT_CONFIG_PATH,
    create_default_config,
    find_config_file,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SNIPPET_REVIEWER_API_KEY", "SNIPPET_REVIEWER_BASE_URL", "SNIPPET_REVIEWER_MODEL"):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_default_file(self, tmp_path):
        path = create_default_config(tmp_path / DEFAULT_CONFIG_PATH)

        cfg = load_config(path)

        assert cfg.llm.model == "gpt-4o"
        assert cfg.llm.api_key == ""
        assert cfg.detection_prefix_length == 2000
        assert cfg.min_detection_length == 20
        assert cfg.history_file == ".snippet-review-history.json"

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = create_default_config(tmp_path / DEFAULT_CONFIG_PATH)
        monkeypatch.setenv("SNIPPET_REVIEWER_API_KEY", "sk-env")
        monkeypatch.setenv("SNIPPET_REVIEWER_BASE_URL", "http://localhost:11434/v1")
        monkeypatch.setenv("SNIPPET_REVIEWER_MODEL", "qwen3-coder:30b")

        cfg = load_config(path)

        assert cfg.llm.api_key == "sk-env"
        assert cfg.llm.base_url == "http://localhost:11434/v1"
        assert cfg.llm.model == "qwen3-coder:30b"

    def test_empty_history_file_disables_history(self, tmp_path):
        path = tmp_path / DEFAULT_CONFIG_PATH
        path.write_text('[llm]\napi_key = "k"\n\n[reviewer]\nhistory_file = ""\n', encoding="utf-8")

        assert load_config(path).history_file is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")


class TestFindConfigFile:
    def test_searches_parents(self, tmp_path):
        path = create_default_config(tmp_path / DEFAULT_CONFIG_PATH)
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == path

    def test_create_refuses_overwrite(self, tmp_path):
        path = create_default_config(tmp_path / DEFAULT_CONFIG_PATH)

        with pytest.raises(FileExistsError):
            create_default_config(path)
