"""Development server: ``python main.py`` serves asgi:app on port 8000."""

import uvicorn

if __name__ == "__main__":
    uvicorn.run("asgi:app", host="0.0.0.0", port=8000, reload=True)
