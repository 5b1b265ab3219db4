# tasks_api/server.py  (프로세스 엔트리포인트)
import logging

import uvicorn
from dotenv import load_dotenv

# .env 를 settings 생성 전에 한 번 로딩
load_dotenv()

from tasks_api.core.config import get_settings  # noqa: E402
from tasks_api.main import create_app  # noqa: E402

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings)
    logger.info("listening on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
