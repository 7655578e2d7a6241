"""
Incremental inscription harvesting pipeline.

Modules:
    runner: Block-by-block harvest loop with crash-safe resumption
    checkpoint: Resume point derived from the highest stored block
    scheduler: APScheduler job that re-runs the loop to follow new blocks
    audit: Per-block harvest run records
    pipeline: Builds the components from settings

Subpackages:
    extractors: Throttled fetcher, ord endpoints, block enumeration, detail aggregation
    transformers: CBOR metadata decoding and row mapping
    loaders: Store protocol, PostgreSQL store, block persister

Architecture:
    For each block from the checkpoint to the source height:

    1. Enumerate - page through the block listing for inscription ids
    2. Aggregate - fetch every inscription's detail with bounded concurrency
    3. Persist - bulk insert the block's rows, skipping ids already stored

    The checkpoint block is deleted and harvested again on every start, so an
    interrupted write never leaves a gap or duplicate rows.

Usage:
    async with build_fetcher(settings) as fetcher:
        runner = build_runner(settings, session, fetcher)
        summary = await runner.run()
"""

__all__ = [
    "HarvestRunner",
    "HarvestSummary",
    "CheckpointResolver",
    "HarvestScheduler",
    "ThrottledFetcher",
    "OrdSource",
    "BlockEnumerator",
    "InscriptionAggregator",
    "InscriptionPersister",
    "PostgresInscriptionStore",
]
