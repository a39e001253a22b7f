"""
Web 진입점

실행 방법:
    python -m web

host/port는 settings.yaml의 web 섹션 (없으면 기본값).
"""

import uvicorn

from core.config.loader import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "web.app:app",
        host=settings.web_host,
        port=settings.web_port,
        reload=False,
    )
