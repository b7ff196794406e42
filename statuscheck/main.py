from __future__ import annotations

import logging
import sys

from statuscheck.config import settings
from statuscheck.runner import Program, ProgramError
from statuscheck.state import CheckModel

logger = logging.getLogger(__name__)

USAGE = "You must enter a URL to check"


def configure_logging() -> None:
    if settings.LOG_FILE:
        logging.basicConfig(
            filename=settings.LOG_FILE,
            level=settings.LOG_LEVEL,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        # Anything written to the terminal would tear the live display.
        logging.getLogger("statuscheck").addHandler(logging.NullHandler())
        logging.getLogger("statuscheck").propagate = False


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE)
        return 1

    configure_logging()
    model = CheckModel(args[0])
    try:
        Program(model).run()
    except ProgramError as exc:
        print(f"Oh no, there was an error: {exc}")
        return 1

    logger.info("Finished checking %s: %s", args[0], model.state.model_dump())
    return 0
