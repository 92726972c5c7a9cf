"""Server entry point"""

import uvicorn

from requestdesk.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "requestdesk.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
