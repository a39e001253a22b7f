"""
Web 서비스 패키지

리포트 집계 로직
"""

from web.services.report_service import ReportService

__all__ = [
    "ReportService",
]
