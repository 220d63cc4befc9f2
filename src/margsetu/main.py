from fastapi import (
    FastAPI,
)
from fastapi.middleware.cors import CORSMiddleware

from margsetu.core import GpsCipher, MessageLog
from margsetu.routers import get_routers
from margsetu.shared import Config, Logger, load_config

logger = Logger(__name__).get_logger()

config = load_config()


# ================================================================================
#       FastAPI Setup
# ================================================================================
def create_app(config: Config = config) -> FastAPI:
    app = FastAPI(title="MargSetu GPS codec")

    # Owned by this app instance and handed to routes through dependencies
    app.state.cipher = GpsCipher.from_config(config.encryption)
    app.state.message_log = MessageLog(max_entries=config.sms.log_size)

    for router in get_routers():
        app.include_router(router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()


# ================================================================================
#       Command Line
# ================================================================================
def welcome():
    # Log server banner
    for line in config.general.title.split("\n"):
        logger.info(line)

    logger.info("Starting GPS codec server")


def main(argv=None):
    welcome()

    import uvicorn

    uvicorn.run(
        "margsetu.main:app",
        host=config.network.host,
        port=config.network.port,
        reload=config.network.reload,
    )


if __name__ == "__main__":
    main()
