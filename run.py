"""Development entry point for running the affiliation dashboard."""

import os
import webbrowser
from threading import Timer

from dotenv import load_dotenv

from kinen.app import create_app

load_dotenv()

app = create_app()

HOST = os.getenv("KINEN_HOST", "127.0.0.1")
PORT = int(os.getenv("KINEN_PORT", "5000"))


def open_browser():
    webbrowser.open_new(f"http://{HOST}:{PORT}")


if __name__ == "__main__":
    Timer(1, open_browser).start()
    app.run(host=HOST, port=PORT)
