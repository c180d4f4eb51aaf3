"""Core wiring for jaap - builds and orchestrates the catalog and sync components."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

from .catalog.aggregator import CatalogAggregator
from .catalog.cache import CachedProvider, CatalogCache
from .catalog.moderation import ModerationClient
from .config import JaapConfig
from .paths import get_data_dir
from .providers import CatalogProvider, ProviderRegistry, UserSubmissionStore
from .recitations import RecitationLog, SavedRecitation
from .remote.client import RemoteClient
from .sheets.session import GoogleSheetsSession
from .stats import DailyStats, MantraStats, compute_stats, daily_stats
from .store import LocalStore
from .sync.models import Recitation
from .sync.notifier import StatusNotifier
from .sync.queue import SyncQueue

logger = logging.getLogger(__name__)


@dataclass
class Tracker:
    """Explicitly constructed application components.

    Every collaborator is passed in, so tests can assemble a Tracker from
    fakes while build_tracker() assembles the production graph.
    """

    store: LocalStore
    catalog: CatalogAggregator
    queue: SyncQueue
    log: RecitationLog

    def log_recitation(
        self,
        mantra_name: str,
        count: int,
        duration_minutes: float = 0,
        mantra_id: str | None = None,
        notes: str | None = None,
        timestamp: datetime | None = None,
    ) -> tuple[SavedRecitation, str]:
        """Save a recitation locally and queue it for delivery.

        Returns:
            Tuple of (saved recitation, queue id)

        Raises:
            ValueError: If the name is empty or the count is not positive
        """
        recitation = Recitation(
            mantra_name=mantra_name,
            count=count,
            mantra_id=mantra_id,
            duration_minutes=duration_minutes,
            timestamp=timestamp,
            notes=notes,
        )
        saved = self.log.add(recitation)
        queue_id = self.queue.enqueue(recitation)
        logger.info(f"Logged {count} x '{mantra_name}' (queued as {queue_id})")
        return saved, queue_id

    def stats(self) -> MantraStats:
        return compute_stats([saved.recitation for saved in self.log.entries()])

    def daily_stats(self) -> list[DailyStats]:
        return daily_stats([saved.recitation for saved in self.log.entries()])


def build_providers(
    config: JaapConfig, cache: CatalogCache, remote: RemoteClient
) -> list[CatalogProvider]:
    """Choose the core catalog providers for a configuration.

    A complete spreadsheet configuration switches the catalog to the
    spreadsheet and suppresses the backend catalog.
    """
    if config.sheets.enabled:
        session = GoogleSheetsSession(
            client_id=config.sheets.client_id or "",
            client_secret=config.sheets.client_secret,
            api_key=config.sheets.api_key,
            sheet_id=config.sheets.sheet_id or "",
        )
        provider = ProviderRegistry.get("spreadsheet")(
            session, list(config.sheets.sheet_names)
        )
        logger.debug("Catalog using spreadsheet provider")
    else:
        provider = ProviderRegistry.get("remote")(remote)
        logger.debug(f"Catalog using backend provider at {remote.base_url}")
    return [CachedProvider(provider, cache)]


def build_tracker(config: JaapConfig, data_dir: Path | None = None) -> Tracker:
    """Assemble the production component graph.

    Args:
        config: Loaded configuration
        data_dir: Directory for the store (defaults to the XDG data dir)
    """
    store = LocalStore(data_dir or get_data_dir())
    remote = RemoteClient(
        base_url=config.remote.base_url,
        api_prefix=config.remote.api_prefix,
        timeout=config.remote.timeout,
    )
    cache = CatalogCache(store, expiry=timedelta(hours=config.catalog.cache_hours))

    moderation = None
    if config.moderation.enabled:
        moderation = ModerationClient(
            config.moderation.base_id or "", config.moderation.api_key or ""
        )

    catalog = CatalogAggregator(
        providers=build_providers(config, cache, remote),
        user_store=UserSubmissionStore(store),
        moderation=moderation,
    )

    notifier = StatusNotifier()
    queue = SyncQueue(
        store,
        remote,
        notifier=notifier,
        max_retries=config.sync.max_retries,
        delivery_timeout=config.sync.delivery_timeout,
        user_id=config.sync.user_id,
    )

    return Tracker(
        store=store,
        catalog=catalog,
        queue=queue,
        log=RecitationLog(store),
    )
