import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the root logger."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    # Avoid duplicate handlers if the app module is reloaded
    if any(getattr(h, "_syllabus_calendar", False) for h in root_logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._syllabus_calendar = True
    root_logger.addHandler(handler)

    for logger_name in ("uvicorn", "uvicorn.error", "fastapi", "syllabus_calendar"):
        logging.getLogger(logger_name).setLevel(level.upper())
