"""
FastAPI приложение: чтение снимка и ручной запуск синхронизации.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from apartments_sync.pipeline import Pipeline
from apartments_sync.services.scheduler import SyncScheduler
from apartments_sync.utils.logger import get_logger
from .routes import router

logger = get_logger("api")

# Глобальный экземпляр пайплайна
pipeline_instance: Pipeline = None


def create_app(pipeline: Pipeline = None) -> FastAPI:
    """
    Создаёт и настраивает приложение FastAPI.

    Args:
        pipeline: Готовый пайплайн (для тестов); иначе создаётся при старте.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Управление жизненным циклом приложения.
        Инициализирует пайплайн и планировщик при запуске.
        """
        global pipeline_instance
        pipeline_instance = pipeline or Pipeline()
        pipeline_instance.init_database()

        scheduler = SyncScheduler(pipeline_instance.sync, pipeline_instance.settings.sync_interval_s)
        scheduler.start()
        logger.info("Pipeline initialized for API")
        yield
        await scheduler.stop()
        logger.info("API shutdown")

    app = FastAPI(
        title="Apartments Sync",
        description="Снимок квартир из каталога застройщика",
        version="1.0.0",
        lifespan=lifespan
    )
    app.include_router(router)
    return app


# Экземпляр для запуска через uvicorn
app = create_app()


def get_pipeline() -> Pipeline:
    """Возвращает глобальный экземпляр пайплайна."""
    if pipeline_instance is None:
        raise RuntimeError("Pipeline not initialized")
    return pipeline_instance
