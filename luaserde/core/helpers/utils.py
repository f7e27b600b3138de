import logging


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for applications embedding luaserde.
    The library itself never installs handlers.
    """
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s',
    )
