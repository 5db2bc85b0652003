"""Entry point for running the server as a module

Usage:
    visualizer-server
    visualizer-server --port 8080
    python -m server --host 127.0.0.1
"""

import sys

import uvicorn

from .app import app


def main():
    """Run the server."""
    host = "0.0.0.0"
    port = 8000
    args = sys.argv[1:]
    for i, arg in enumerate(args):
        if arg == "--port" and i + 1 < len(args):
            port = int(args[i + 1])
        elif arg == "--host" and i + 1 < len(args):
            host = args[i + 1]

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
