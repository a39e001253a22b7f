"""
core/config/loader.py 테스트

settings.yaml 로드, 검증, 기본값, Settings 싱글턴 테스트
"""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from core.config.loader import (
    AppConfig,
    Settings,
    SettingsLoadError,
    get_db_path,
    get_settings,
    load_config,
    resolve_settings_path,
)
from core.constants import SETTINGS_ENV_VAR, Defaults, Paths
from core.types import Environment


class TestLoadConfig:
    """load_config 함수 테스트"""

    def test_load_full_file(self, temp_settings_file: Path) -> None:
        """모든 섹션이 있는 파일 로드"""
        config = load_config(temp_settings_file)

        assert config.environment == Environment.PRODUCTION
        assert config.web_host == "0.0.0.0"
        assert config.web_port == 9000
        assert config.default_base_currency == "USD"
        assert config.default_allow_negative_balances is False

    def test_missing_file_uses_defaults(self, temp_dir: Path) -> None:
        """파일이 없으면 개발 환경 기본값"""
        config = load_config(temp_dir / "nope.yaml")

        assert config.environment == Environment.DEVELOPMENT
        assert config.web_port == Defaults.WEB_PORT
        assert config.default_base_currency == Defaults.BASE_CURRENCY
        assert config.default_allow_negative_balances is True

    def test_empty_file_uses_defaults(self, temp_dir: Path) -> None:
        """빈 파일도 기본값"""
        path = temp_dir / "settings.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path).environment == Environment.DEVELOPMENT

    def test_partial_file(self, temp_dir: Path) -> None:
        """일부 섹션만 있으면 나머지는 기본값"""
        path = temp_dir / "settings.yaml"
        path.write_text("finance:\n  default_base_currency: eur\n", encoding="utf-8")

        config = load_config(path)
        assert config.default_base_currency == "EUR"
        assert config.web_host == Defaults.WEB_HOST

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        """YAML 파싱 실패"""
        path = temp_dir / "settings.yaml"
        path.write_text("web: [unclosed", encoding="utf-8")

        with pytest.raises(SettingsLoadError):
            load_config(path)

    def test_non_mapping_root(self, temp_dir: Path) -> None:
        """최상위가 리스트면 실패"""
        path = temp_dir / "settings.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError):
            load_config(path)

    def test_invalid_environment(self, temp_dir: Path) -> None:
        """유효하지 않은 environment"""
        path = temp_dir / "settings.yaml"
        path.write_text("environment: staging\n", encoding="utf-8")

        with pytest.raises(ValueError, match="staging"):
            load_config(path)

    def test_invalid_port(self, temp_dir: Path) -> None:
        """숫자가 아닌 포트"""
        path = temp_dir / "settings.yaml"
        path.write_text("web:\n  port: abc\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError):
            load_config(path)

    def test_blank_base_currency(self, temp_dir: Path) -> None:
        """빈 기준 통화"""
        path = temp_dir / "settings.yaml"
        path.write_text("finance:\n  default_base_currency: '  '\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError):
            load_config(path)

    def test_config_frozen(self, temp_settings_file: Path) -> None:
        """불변성 확인"""
        config = load_config(temp_settings_file)

        with pytest.raises(FrozenInstanceError):
            config.web_port = 1  # type: ignore


class TestResolveSettingsPath:
    """설정 경로 우선순위"""

    def test_argument_wins(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(temp_dir / "env.yaml"))
        assert resolve_settings_path(temp_dir / "arg.yaml") == temp_dir / "arg.yaml"

    def test_env_var(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(temp_dir / "env.yaml"))
        assert resolve_settings_path() == temp_dir / "env.yaml"

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
        assert resolve_settings_path() == Paths.SETTINGS_FILE


class TestGetDbPath:
    """환경별 DB 경로"""

    def _config(self, environment: Environment) -> AppConfig:
        return AppConfig(
            environment=environment,
            web_host="127.0.0.1",
            web_port=8000,
            default_base_currency="BDT",
            default_allow_negative_balances=True,
        )

    def test_production(self) -> None:
        assert get_db_path(self._config(Environment.PRODUCTION)) == Paths.PROD_DB

    def test_development(self) -> None:
        assert get_db_path(self._config(Environment.DEVELOPMENT)) == Paths.DEV_DB


class TestSettings:
    """Settings 싱글턴 테스트"""

    def test_singleton(self, temp_settings_file: Path) -> None:
        """같은 인스턴스 반환"""
        first = get_settings(temp_settings_file)
        second = get_settings()

        assert first is second
        assert second.web_port == 9000

    def test_properties(self, temp_settings_file: Path) -> None:
        settings = Settings(temp_settings_file)

        assert settings.environment == Environment.PRODUCTION
        assert settings.default_base_currency == "USD"
        assert settings.default_allow_negative_balances is False
        assert settings.db_path == Paths.PROD_DB

    def test_reset(self, temp_settings_file: Path, temp_dir: Path) -> None:
        """reset 후 다시 로드"""
        get_settings(temp_settings_file)
        Settings.reset()

        settings = get_settings(temp_dir / "missing.yaml")
        assert settings.environment == Environment.DEVELOPMENT
