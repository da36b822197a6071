import os
import logging
from logging.config import dictConfig
import json

from social.graze.federation.app.config import get_settings


def configure_logging():
    logging_config_file = os.getenv("LOGGING_CONFIG_FILE", "")

    if len(logging_config_file) > 0:
        with open(logging_config_file) as fl:
            dictConfig(json.load(fl))
        return

    logging.basicConfig()
    logging.getLogger().setLevel(logging.DEBUG if get_settings().debug else logging.INFO)


def invoke():
    configure_logging()

    from social.graze.federation.resolve.__main__ import main

    main()


if __name__ == "__main__":
    invoke()
