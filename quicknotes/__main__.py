"""
QuickNotes process entry point.

    $ STORAGE_LOCATION=./notes.db quicknotes
    $ python -m quicknotes

Reads every option from the environment (see quicknotes.config) and serves
until terminated. If the store cannot be opened, uvicorn aborts startup and
the process exits with a non-zero status.
"""

import uvicorn

from quicknotes.config import settings


def main() -> None:
    uvicorn.run(
        "quicknotes.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
