from __future__ import annotations

import uvicorn

from moodlog.app.core.config import get_settings
from moodlog.app.main import app


def run() -> None:
    """Run the Mood Tracker API on the configured port."""

    port = get_settings().port
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
