"""CLI entry point for launching the FastAPI app with uvicorn."""

import os

import uvicorn


def main() -> None:
    """Run the development server."""
    uvicorn.run(
        "remind_me.server.app:app",
        host=os.getenv("REMIND_ME_HOST", "0.0.0.0"),
        port=int(os.getenv("REMIND_ME_PORT", "8000")),
        reload=os.getenv("REMIND_ME_RELOAD", "").lower() in ("1", "true", "yes"),
    )


if __name__ == "__main__":
    main()
