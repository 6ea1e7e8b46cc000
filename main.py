"""
Development server entry point.

    python main.py

Production deployments point an ASGI server at ``asgi:app`` instead.
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run("asgi:app", host="0.0.0.0", port=8000, reload=True)
