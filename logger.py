import logging
import sys

from settings import settings

HANDLER_NAME = "gym"


def configure_logging():
    root = logging.getLogger()
    # Streamlit reruns the script on every interaction; install the handler once
    if any(h.get_name() == HANDLER_NAME for h in root.handlers):
        return

    level = getattr(logging, settings.log_level, logging.INFO)
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    # Short time only (HH:MM:SS) keeps lines concise
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
