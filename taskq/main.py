import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from taskq.config import get_settings

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

from taskq.api import routes  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _ = app
    yield
    await routes.shutdown()


def create_app() -> FastAPI:
    """
    创建 FastAPI 应用，并挂载路由。
    """
    app = FastAPI(
        title="Task Queue Dispatcher",
        version="0.1.0",
        lifespan=lifespan,
    )

    # 预加载配置，启动时如果 .env 有问题可以尽早暴露
    get_settings()

    app.include_router(routes.router)

    @app.get("/health", summary="健康检查")
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    logger.info("🚀 Queue service listening on %s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
