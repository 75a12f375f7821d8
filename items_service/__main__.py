from __future__ import annotations

import uvicorn

from items_service.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "items_service.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
