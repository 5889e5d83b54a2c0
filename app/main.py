import logging

from flask import Flask

from app.api.webhook import api

LOG_FORMAT = "%(asctime)s %(levelname)s:%(message)s"


# ================================
# INIT
# ================================
def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def create_app() -> Flask:
    """
    Build the Flask app serving the Telegram webhook.
    """
    app = Flask(__name__)
    app.register_blueprint(api)
    return app


# ================================
# START
# ================================
if __name__ == "__main__":
    # Same startup path as the root entry point, including the config check
    from main import main

    main()
