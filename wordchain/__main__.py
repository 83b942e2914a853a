import uvicorn

from .config import Settings
from .main import create_asgi_app


def main():
    settings = Settings.from_env()
    uvicorn.run(create_asgi_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
