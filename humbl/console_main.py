"""Entry point for the Gradio console."""
from __future__ import annotations

from .config import load_settings
from .frontend import create_frontend
from .logging import setup_logging


def main() -> None:
    settings = load_settings()
    setup_logging(settings)
    demo = create_frontend(settings)
    demo.queue().launch(server_name=settings.client.console_host, server_port=settings.client.console_port)


if __name__ == "__main__":
    main()
