"""
설정 로더

settings.yaml 로드 및 실행 환경별 설정 생성
"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from core.constants import SETTINGS_ENV_VAR, Defaults, Paths
from core.types import Environment


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    environment: Environment
    web_host: str
    web_port: int
    default_base_currency: str
    default_allow_negative_balances: bool


class SettingsLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _default_config() -> AppConfig:
    return AppConfig(
        environment=Environment.DEVELOPMENT,
        web_host=Defaults.WEB_HOST,
        web_port=Defaults.WEB_PORT,
        default_base_currency=Defaults.BASE_CURRENCY,
        default_allow_negative_balances=Defaults.ALLOW_NEGATIVE_BALANCES,
    )


def resolve_settings_path(path: Path | None = None) -> Path:
    """설정 파일 경로 결정

    우선순위: 인자 > 환경변수(FUNDLEDGER_SETTINGS) > 기본 경로
    """
    if path is not None:
        return path
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Paths.SETTINGS_FILE


def load_config(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    파일이 없으면 개발 환경 기본값 사용.

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        SettingsLoadError: 형식이 잘못된 경우
        ValueError: 유효하지 않은 environment인 경우
    """
    path = resolve_settings_path(path)

    if not path.exists():
        return _default_config()

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        return _default_config()

    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    env_str = data.get("environment", Environment.DEVELOPMENT.value)
    try:
        environment = Environment(str(env_str).lower())
    except ValueError as e:
        valid = [env.value for env in Environment]
        raise ValueError(
            f"유효하지 않은 environment입니다: '{env_str}'. "
            f"유효한 값: {valid}"
        ) from e

    web_config = data.get("web") or {}
    finance_config = data.get("finance") or {}

    try:
        web_port = int(web_config.get("port", Defaults.WEB_PORT))
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"web.port 값이 잘못되었습니다: {web_config.get('port')}") from e

    base_currency = str(
        finance_config.get("default_base_currency", Defaults.BASE_CURRENCY)
    ).strip().upper()
    if not base_currency:
        raise SettingsLoadError("finance.default_base_currency가 비어 있습니다")

    return AppConfig(
        environment=environment,
        web_host=str(web_config.get("host", Defaults.WEB_HOST)),
        web_port=web_port,
        default_base_currency=base_currency,
        default_allow_negative_balances=bool(
            finance_config.get(
                "default_allow_negative_balances",
                Defaults.ALLOW_NEGATIVE_BALANCES,
            )
        ),
    )


def get_db_path(config: AppConfig) -> Path:
    """환경에 따른 DB 경로 반환"""
    if config.environment == Environment.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEV_DB


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_config(settings_path)

    @property
    def config(self) -> AppConfig:
        assert self._config is not None
        return self._config

    @property
    def environment(self) -> Environment:
        """현재 실행 환경"""
        return self.config.environment

    @property
    def web_host(self) -> str:
        return self.config.web_host

    @property
    def web_port(self) -> int:
        return self.config.web_port

    @property
    def default_base_currency(self) -> str:
        """FinanceSettings 최초 생성 시 기준 통화"""
        return self.config.default_base_currency

    @property
    def default_allow_negative_balances(self) -> bool:
        return self.config.default_allow_negative_balances

    @property
    def db_path(self) -> Path:
        """현재 환경의 DB 경로"""
        return get_db_path(self.config)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
