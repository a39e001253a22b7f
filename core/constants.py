"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → fundledger/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    BASE_CURRENCY: str = "BDT"
    ALLOW_NEGATIVE_BALANCES: bool = True

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "fundledger_prod.db"
    DEV_DB: Path = DATA_DIR / "fundledger_dev.db"


class Precision:
    """금액 정밀도 (DB 저장 기준)"""

    AMOUNT: Decimal = Decimal("0.01")  # 원장 금액: 소수점 2자리
    FX_RATE: Decimal = Decimal("0.000001")  # 환율: 소수점 6자리

    # 입력 금액·환율 절대값 상한 (미만만 허용)
    MAX_MAGNITUDE: Decimal = Decimal("1e15")

    # 잔액 대사 허용 오차
    RECONCILE_TOLERANCE: Decimal = Decimal("0.01")


# 설정 파일 경로 재지정용 환경변수
SETTINGS_ENV_VAR: str = "FUNDLEDGER_SETTINGS"
