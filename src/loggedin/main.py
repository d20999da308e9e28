"""Entry point: load configuration, set up logging and serve the API with uvicorn."""

import structlog
import uvicorn

from loggedin.app import App
from loggedin.config import Config
from loggedin.core.modules.limit.models import LimitPolicy
from loggedin.core.modules.limit.options import InMemoryOptionStore
from loggedin.logging import setup_logging
from loggedin.web.server import create_fastapi_app

logger = structlog.get_logger(__name__)


def main() -> None:
    config = Config()
    setup_logging(config.debug)

    # An unknown logic value is reported here, before the first login hits it
    policy = LimitPolicy.from_options(InMemoryOptionStore(config.limit_options()))
    logger.info(
        "server_starting",
        host=config.host,
        port=config.port,
        login_logic=policy.logic,
        login_maximum=policy.maximum,
        eviction=policy.eviction,
    )

    fastapi_app = create_fastapi_app(App(config), config)
    # uvicorn loggers propagate to the handler set up by setup_logging
    uvicorn.run(fastapi_app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
