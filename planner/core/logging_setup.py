import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configure le logging de l'application: un seul handler stderr.

    A appeler une fois, au démarrage (lifespan FastAPI).
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Evite les doublons si l'app redémarre dans le même process (tests, reload)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    root.addHandler(handler)

    # SQLAlchemy est très bavard en DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
