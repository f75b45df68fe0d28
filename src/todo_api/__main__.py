"""
Run the API with uvicorn.

Usage:
    python -m todo_api

HOST and PORT environment variables override the bind address (default 127.0.0.1:8000).
"""
from __future__ import annotations

import os

import uvicorn


def main() -> None:
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("todo_api.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
