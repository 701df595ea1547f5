import uvicorn

from moneybox.core.config import settings


def main() -> None:
    uvicorn.run("moneybox.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
