"""Point d'entrée de la console d'administration."""

from __future__ import annotations

import logging
import sys

from adminconsole.config import ConfigError, load_config
from adminconsole.services import SessionApiClient
from adminconsole.state import AdminState
from adminconsole.ui.app import MainWindow

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def main() -> None:
    """Initialise les dépendances puis lance l'interface Tkinter."""
    try:
        config = load_config()
    except ConfigError as exc:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error("Configuration invalide : %s", exc)
        sys.exit(1)

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    logger.info("Backend d'administration : %s", config.base_url)

    client = SessionApiClient.from_config(config)
    state = AdminState()
    app = MainWindow(client=client, state=state)
    app.run()


if __name__ == "__main__":
    main()
