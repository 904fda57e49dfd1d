from __future__ import annotations

import os

from pricer_setter.app import create_app
from pricer_setter.config import Settings
from pricer_setter.logging_config import setup_logging

settings = Settings.from_env()

setup_logging(environment=settings.environment, project_id=settings.project_id)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
