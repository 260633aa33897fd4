import logging
from typing import Optional
import click

from library_ledger.config import Settings, settings
from library_ledger.cli import LibraryConsole
from library_ledger.services.lending import LendingService
from library_ledger.services.seed import seed_sample_data

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(config: Settings, level: Optional[str] = None) -> None:
    """Console logging, plus an appending log file when one is configured."""
    handlers = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, mode="a", encoding="utf-8"))
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


@click.command()
@click.option("--seed/--no-seed", default=None, help="Load sample books and users at startup.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
def main(seed: Optional[bool], log_level: Optional[str]):
    """Library lending ledger console."""
    configure_logging(settings, log_level)

    service = LendingService(settings)
    try:
        if settings.seed_sample_data if seed is None else seed:
            seed_sample_data(service)
        LibraryConsole(service).run()
    finally:
        service.close()
        logger.info("Library service stopped")


if __name__ == "__main__":
    main()
