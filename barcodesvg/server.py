# server.py
# Flask application factory and runner for the barcode preview API.

import sys

from flask import Flask

from barcodesvg import config
from barcodesvg.api import api_bp, fonts_bp
from barcodesvg.fonts import default_font_cache
from barcodesvg.logging_setup import configure_logging


def create_app(overrides=None):
    """Flask application factory"""
    configure_logging()

    app = Flask(__name__)
    app.config.update(
        FONT_CACHE=default_font_cache,
        FONT_DIR=str(config.FONT_PATH.parent),
        MAX_CONTENT_LENGTH=16 * 1024 * 1024,
    )
    if overrides:
        app.config.update(overrides)

    app.register_blueprint(api_bp)
    app.register_blueprint(fonts_bp)
    return app


def main():
    app = create_app()
    logger = configure_logging()
    logger.info("Barcode preview API on http://%s:%s (debug=%s)", config.FLASK_HOST, config.FLASK_PORT,
                config.FLASK_DEBUG)
    try:
        app.run(
            host=config.FLASK_HOST,
            port=config.FLASK_PORT,
            debug=config.FLASK_DEBUG,
            use_reloader=config.FLASK_DEBUG,
        )
    except KeyboardInterrupt:
        logger.info("Shutting down")
        sys.exit(0)


if __name__ == "__main__":
    main()
