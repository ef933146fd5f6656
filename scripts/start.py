"""Container entrypoint for the intake funnel.

Applies pending Alembic migrations, then replaces this process with
uvicorn serving ``intake.main:app``.
"""

import os
import subprocess
import sys


def run_migrations() -> bool:
    """Upgrade the database to the latest revision."""
    print("Applying database migrations...")
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        print(f"Migration failed:\n{result.stderr}", file=sys.stderr)
        return False
    print(result.stdout or "Database is up to date.")
    return True


def uvicorn_args() -> list[str]:
    host = os.getenv("API_HOST", "0.0.0.0")
    port = os.getenv("PORT") or os.getenv("API_PORT", "8000")
    workers = os.getenv("API_WORKERS", "1")
    return [
        "uvicorn",
        "intake.main:app",
        "--host",
        host,
        "--port",
        port,
        "--workers",
        workers,
        "--proxy-headers",
        "--forwarded-allow-ips",
        "*",
    ]


def main() -> None:
    if os.getenv("RUN_MIGRATIONS", "true").lower() == "true" and not run_migrations():
        # Never serve against an out-of-date schema
        sys.exit(1)

    args = uvicorn_args()
    print(f"Starting server: {' '.join(args[1:])}")
    os.execvp(args[0], args)


if __name__ == "__main__":
    main()
