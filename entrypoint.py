"""Backend entrypoint: starts uvicorn with host/port from env."""
import os
import uvicorn

from livefolio.main import app


def main() -> None:
    host = os.environ.get("LIVEFOLIO_HOST", "127.0.0.1")
    port = int(os.environ.get("LIVEFOLIO_PORT", "8001"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
