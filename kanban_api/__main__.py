import uvicorn
from kanban_api.config import load_settings


def main():
    settings = load_settings()
    uvicorn.run(
        "kanban_api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
