import logging
import sys

from dotenv import load_dotenv

# === ENV VARIABLES ===
# .env first, so the settings below see it
load_dotenv()

from app.config import get_settings, missing_settings  # noqa: E402
from app.main import configure_logging, create_app  # noqa: E402
from app.services.telegram import set_webhook  # noqa: E402


def startup_check() -> None:
    """Exit with status 1 if any required credential is missing."""
    missing = missing_settings()
    if missing:
        logging.error(
            "❌ Missing required environment variables: %s. Please check .env",
            ", ".join(missing),
        )
        sys.exit(1)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    startup_check()

    if settings.webhook_url:
        if set_webhook(settings.webhook_url, settings.webhook_secret):
            logging.info("✅ Webhook registered at %s", settings.webhook_url)
        else:
            logging.warning("⚠️ Webhook registration failed; updates may not arrive.")

    app = create_app()
    logging.info("VoiceLog.ai bot is running on port %s...", settings.port)
    app.run(host="0.0.0.0", port=settings.port, threaded=True)


if __name__ == "__main__":
    main()
