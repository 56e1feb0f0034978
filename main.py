import os

import uvicorn

from api.app import app


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.environ.get("CLOUDMASTER_HOST", "127.0.0.1"),
        port=int(os.environ.get("CLOUDMASTER_PORT", "8000")),
    )
