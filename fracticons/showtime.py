"""
Fracticons HTTP service: Flask entrypoint
"""

import logging
import sys

from flask import Flask

from fracticons.api.routes import bp as api_bp
from fracticons.config import Settings, load_settings


def create_app(settings: Settings = None) -> Flask:
    app = Flask(__name__)
    app.config["FRACTICONS_SETTINGS"] = settings or load_settings()
    app.register_blueprint(api_bp)
    return app


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    settings = load_settings()
    port = settings.port
    if "--port" in argv:
        try:
            port = int(argv[argv.index("--port") + 1])
        except (IndexError, ValueError):
            print("[Fracticons] --port expects an integer, using", port)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app = create_app(settings)
    print(f"[Fracticons] running at http://{settings.host}:{port}")
    app.run(host=settings.host, port=port, debug=False)


if __name__ == "__main__":
    main()
