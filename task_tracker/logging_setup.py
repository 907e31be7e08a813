import logging
import sys


def setup_logging(level: str | int = logging.INFO, error_log_file: str | None = None) -> None:
    """
    Configure the root logger:
    - console handler on stderr at ``level``
    - optional file handler that keeps only ERROR and above

    Safe to call more than once; existing handlers are replaced.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if error_log_file:
        fh = logging.FileHandler(error_log_file, encoding="utf-8")
        fh.setLevel(logging.ERROR)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    # SQL echo is far too chatty at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
