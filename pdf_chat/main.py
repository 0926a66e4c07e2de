"""Application entry point.

RUN_MODE=integrated (default) serves the API and the chat UI from one
uvicorn process. RUN_MODE=separate starts the API and the NiceGUI app as two
processes, with the UI reaching the API through API_BASE_URL.
"""

import logging
import os
import subprocess
import sys

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))


def run_integrated() -> None:
    """Mount the NiceGUI pages onto the API app and serve both on PORT."""
    import uvicorn
    from nicegui import ui

    from pdf_chat.api.app import create_app
    from pdf_chat.ui import chat_page  # noqa: F401 - registers the pages

    app = create_app()
    ui.run_with(
        app,
        title="PDF Chat",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "pdf-chat-secret"),
    )

    logger.info(f"Serving API and chat UI on http://{HOST}:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_separate() -> None:
    """Run the API and the UI as two child processes until either exits."""
    api_cmd = [
        sys.executable, "-m", "uvicorn", "pdf_chat.api.app:app",
        "--host", HOST, "--port", str(PORT),
    ]
    ui_cmd = [sys.executable, "-m", "pdf_chat.ui.chat_page"]

    logger.info(f"Starting API on port {PORT} and chat UI on port 8080")
    procs = [subprocess.Popen(api_cmd), subprocess.Popen(ui_cmd)]
    try:
        while all(proc.poll() is None for proc in procs):
            try:
                procs[0].wait(timeout=1)
            except subprocess.TimeoutExpired:
                continue
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        for proc in procs:
            proc.terminate()
        for proc in procs:
            proc.wait()


def main() -> None:
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Starting PDF Chat in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
