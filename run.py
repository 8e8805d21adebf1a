import argparse
import logging
import os

from flask import cli as flask_cli

from markshelf import create_app


def _quiet_dev_server() -> None:
    # Request lines and the startup banner are noise next to the app log.
    logging.getLogger("werkzeug").disabled = True
    flask_cli.show_server_banner = lambda *args, **kwargs: None


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(
        prog="markshelf", description="Serve the bookmark manager."
    )
    parser.add_argument("--host", default=os.environ.get("MARKSHELF_HOST", "127.0.0.1"))
    parser.add_argument(
        "--port", type=int, default=int(os.environ.get("MARKSHELF_PORT", "8073"))
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    _quiet_dev_server()

    app = create_app()
    app.logger.info("Serving bookmarks at http://%s:%s", args.host, args.port)
    # The change stream holds a request open, so other requests need threads.
    app.run(host=args.host, port=args.port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
