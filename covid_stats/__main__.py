#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import sys

# 3rd party:

# Internal:
from covid_stats.startup import start_logging
from covid_stats.main import handler

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~


def run() -> int:
    logger = start_logging()

    try:
        result = handler()
    except Exception as err:
        logger.exception(err)
        return 1

    logger.info(result)
    return 0


if __name__ == "__main__":
    sys.exit(run())
