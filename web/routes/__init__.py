"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 자금 계정 CRUD, 일괄 import
- ledger: 원장 항목 조회/기록, 참조 삭제, 잔액 재계산
- transfers: 계정 간 이체
- settings: 재무 설정
- exchange_rates: 환율 CRUD, 환산
- payment_methods: 결제수단 레지스트리
- reports: 기준 통화 집계, 잔액 대사
"""
