import logging
import sys

_HANDLER_NAME = "reqflow"


def setup_logging(debug: bool = False) -> None:
    """Attach a stderr handler to the ``reqflow`` logger.

    Calling it again only adjusts the level, so factories can call it freely.
    """
    logger = logging.getLogger("reqflow")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
