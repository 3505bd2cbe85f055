"""Application entry point.

Configures tracing and structured logging before the app is built.

Run with::

    uvicorn src.main:app --host 0.0.0.0 --port 8080 --reload
"""

from src.config.telemetry import configure_telemetry

configure_telemetry()

from src.api.app import create_app  # noqa: E402

app = create_app()
