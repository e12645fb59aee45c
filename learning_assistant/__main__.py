from __future__ import annotations

import uvicorn

from learning_assistant.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("learning_assistant.main:app", host="0.0.0.0", port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
