"""Run the API under Uvicorn, configured from the environment."""

from __future__ import annotations

import os

import uvicorn


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def main() -> None:
    reload = _flag("UVICORN_RELOAD") and os.getenv("ENV", "development").lower() != "production"
    # uvicorn ignores workers when reloading
    workers = 1 if reload else int(os.getenv("UVICORN_WORKERS", "2"))

    uvicorn.run(
        "repflow.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=reload,
        workers=workers,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        proxy_headers=True,
        forwarded_allow_ips=os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1"),
    )


if __name__ == "__main__":
    main()
