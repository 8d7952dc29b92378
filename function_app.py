import os
import logging
import azure.functions as func

from photobooth.function_blueprints.compose_photo_blueprint import bp as compose_photo_bp

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)


def _configure_logging() -> None:
    lvl = (os.getenv("AZURE_SDK_LOG_LEVEL") or "").upper()
    if lvl:
        level = getattr(logging, lvl, logging.INFO)
        logging.getLogger("azure").setLevel(level)
        logging.getLogger("azure.storage").setLevel(level)
    app_lvl = (os.getenv("PHOTOBOOTH_LOG_LEVEL") or "INFO").upper()
    logging.getLogger("photobooth").setLevel(getattr(logging, app_lvl, logging.INFO))


_configure_logging()

app.register_functions(compose_photo_bp)
