from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from finance_categorizer.api.routes import categorize, rules
from finance_categorizer.classifiers.learned import MIN_FUZZY_CONFIDENCE
from finance_categorizer.core import settings
from finance_categorizer.domain.locales import get_locale
from finance_categorizer.integration.storage import JsonFileStore
from finance_categorizer.logger import get_logger, setup_logging
from finance_categorizer.manager import Categorizer
from finance_categorizer.services.rule_store import RuleStore

logger = get_logger(__name__)


def build_categorizer() -> Categorizer:
    rule_store = RuleStore(JsonFileStore(settings.DATA_DIR), key=settings.RULES_STORAGE_KEY)
    return Categorizer(
        rule_store=rule_store,
        locale=get_locale(settings.LOCALE),
        fuzzy_options=settings.fuzzy_options(),
        min_fuzzy_confidence=settings.min_fuzzy_confidence(MIN_FUZZY_CONFIDENCE),
    )


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing categorizer...")
        settings.log_environment()

        categorizer = build_categorizer()
        app.state.categorizer = categorizer

        logger.info(
            "Categorizer ready: locale=%s, %d taxonomy categories, %d learned rules.",
            categorizer.locale.name,
            len(categorizer.taxonomy),
            len(categorizer.rules()),
        )
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Finance Categorizer", lifespan=lifespan)

    app.include_router(categorize.router)
    app.include_router(rules.router)

    return app


app = create_app()
