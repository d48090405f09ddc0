import logging

from rich.logging import RichHandler

_CONFIGURED = False


def configure_logging(level: str = "INFO") -> None:
    """Route the app's loggers through rich. Safe to call more than once."""
    global _CONFIGURED
    root = logging.getLogger("app")
    root.setLevel(level.upper())
    if _CONFIGURED:
        return
    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    _CONFIGURED = True
