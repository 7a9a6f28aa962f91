# relaypanel/__main__.py

import uvicorn

from relaypanel.adapters.configuration.config import settings


def main() -> None:
    uvicorn.run("relaypanel.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
