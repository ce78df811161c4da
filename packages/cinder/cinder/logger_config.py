import logging


class LevelTagFormatter(logging.Formatter):
    """Prefixes each record with a short tag for its level."""

    LEVEL_TAGS = {
        logging.DEBUG: "[dbg]",
        logging.INFO: "[inf]",
        logging.WARNING: "[WRN]",
        logging.ERROR: "[ERR]",
        logging.CRITICAL: "[CRT]",
    }

    def format(self, record: logging.LogRecord) -> str:
        s = super().format(record)
        tag = self.LEVEL_TAGS.get(record.levelno, "")
        return f"{tag} {s}"


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configures the root logger with the LevelTagFormatter.
    Call once at the application's entry point; library modules only log.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        LevelTagFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    # Remove any existing handlers to avoid duplicate logs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.addHandler(console_handler)
