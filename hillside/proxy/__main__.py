import uvicorn

from hillside.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "hillside.proxy.main:app",
        host=settings.proxy_host,
        port=settings.proxy_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
