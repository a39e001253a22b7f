"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class Environment(str, Enum):
    """실행 환경 (운영 / 개발)"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class AccountType(str, Enum):
    """자금 계정 유형"""

    CASH = "cash"
    MOBILE_WALLET = "mobile_wallet"
    BANK_ACCOUNT = "bank_account"
    CARD = "card"
    CRYPTO = "crypto"
    OTHER = "other"


class AccountStatus(str, Enum):
    """자금 계정 상태

    ARCHIVED 계정은 조회만 가능하고 이체 대상이 될 수 없음.
    """

    ACTIVE = "active"
    ARCHIVED = "archived"


class InvestmentDirection(str, Enum):
    """투자 거래 방향"""

    COST = "cost"  # 투자금 지출
    INCOME = "income"  # 투자 수익
