"""
Wire the harvest components from settings
"""

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from harvester.audit import HarvestRunRecorder
from harvester.checkpoint import CheckpointResolver
from harvester.extractors.aggregator import InscriptionAggregator
from harvester.extractors.enumerator import BlockEnumerator
from harvester.extractors.fetcher import ThrottledFetcher
from harvester.extractors.source import OrdSource
from harvester.loaders.persister import InscriptionPersister
from harvester.loaders.postgres_store import PostgresInscriptionStore
from harvester.runner import HarvestRunner


def build_fetcher(settings: Settings) -> ThrottledFetcher:
    return ThrottledFetcher(
        max_retries=settings.MAX_RETRIES,
        retry_delay=settings.RETRY_DELAY,
        retry_max_delay=settings.RETRY_MAX_DELAY,
        timeout=settings.REQUEST_TIMEOUT,
        deadline=settings.REQUEST_DEADLINE,
    )


def build_runner(settings: Settings, db_session: AsyncSession, fetcher: ThrottledFetcher) -> HarvestRunner:
    source = OrdSource(settings.ORD_HOST, fetcher)
    store = PostgresInscriptionStore(db_session)
    return HarvestRunner(
        source=source,
        enumerator=BlockEnumerator(
            source,
            page_failure_policy=settings.PAGE_FAILURE_POLICY,
            max_consecutive_failures=settings.MAX_CONSECUTIVE_PAGE_FAILURES,
        ),
        aggregator=InscriptionAggregator(
            source,
            throttle_width=settings.THROTTLE_WIDTH,
            failure_policy=settings.FETCH_FAILURE_POLICY,
        ),
        persister=InscriptionPersister(store, batch_size=settings.BATCH_SIZE),
        resolver=CheckpointResolver(store, genesis_block=settings.GENESIS_BLOCK),
        recorder=HarvestRunRecorder(db_session),
        until_block=settings.HARVEST_UNTIL_BLOCK,
    )
