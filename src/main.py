"""Process entry point for the chat relay.

RUN_MODE=integrated (default) serves the relay API and the NiceGUI pages from
one uvicorn server on PORT. RUN_MODE=separate starts the API on PORT and the
UI on UI_PORT as two child processes and stops both when either exits.

The UI finds the relay through src.ui.stream_client.api_base_url(), which
follows PORT unless API_BASE_URL is set.
"""

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

RUN_MODES = ("integrated", "separate")


def _warn_if_unconfigured() -> None:
    if not os.getenv("ANTHROPIC_API_KEY", "").strip():
        logger.warning("ANTHROPIC_API_KEY is not set; every chat request will fail")


def run_integrated() -> None:
    """Serve the relay endpoint and the chat pages on a single port."""
    import uvicorn
    from nicegui import ui

    from src.api.app import create_app
    from src.ui import chat_page  # noqa: F401 - registers the pages

    app = create_app()
    port = int(os.getenv("PORT", "8000"))

    ui.run_with(
        app,
        title="Chat",
        dark=True,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chat-relay-secret"),
    )

    _warn_if_unconfigured()
    logger.info(f"Chat UI on http://localhost:{port}/ (assistant panel at /assistant)")
    logger.info(f"Relay endpoint POST http://localhost:{port}/api/chat")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


async def supervise(*commands: list[str]) -> int:
    """Run child processes until the first one exits, then stop the others.

    Returns:
        Exit code of the process that finished first.
    """
    procs = [await asyncio.create_subprocess_exec(*cmd) for cmd in commands]
    waiters = [asyncio.create_task(proc.wait()) for proc in procs]
    try:
        done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        return next(iter(done)).result()
    finally:
        for proc in procs:
            if proc.returncode is None:
                proc.terminate()
        await asyncio.gather(*waiters)


def run_separate() -> int:
    """Run the relay API and the chat UI as separate servers."""
    host = os.getenv("HOST", "0.0.0.0")
    api_port = os.getenv("PORT", "8000")
    ui_port = os.getenv("UI_PORT", "8080")

    api_cmd = [
        sys.executable, "-m", "uvicorn", "src.api.app:app",
        "--host", host, "--port", api_port,
    ]
    ui_cmd = [sys.executable, "-c", "from src.ui.chat_page import main; main()"]

    _warn_if_unconfigured()
    logger.info(f"Starting relay API on http://localhost:{api_port}")
    logger.info(f"Starting chat UI on http://localhost:{ui_port}")

    try:
        return asyncio.run(supervise(api_cmd, ui_cmd))
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
        return 0


def main() -> None:
    """Application entry point, dispatching on RUN_MODE."""
    mode = os.getenv("RUN_MODE", "integrated").lower()
    if mode not in RUN_MODES:
        logger.warning(f"Unknown RUN_MODE {mode!r}, using integrated")
        mode = "integrated"

    logger.info(f"Starting chat relay in {mode} mode")

    if mode == "separate":
        sys.exit(run_separate())
    run_integrated()


if __name__ == "__main__":
    main()
