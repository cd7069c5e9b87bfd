"""Run the GUI service: python -m gui"""

import uvicorn

from gui.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "gui.main:app", host=settings.gui_host, port=settings.gui_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
