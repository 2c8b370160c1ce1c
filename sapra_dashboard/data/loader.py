"""
SAPRA Dashboard - Record Loader
===============================

Single entry point for all data ingestion.  Four independent, header-keyed
CSV feeds are fetched (over HTTP with ``requests`` or from a local path),
parsed with pandas and turned into typed records:

    main summary   ->  RawRow           ->  build_hierarchy()  ->  ProcessedData
    item details   ->  DetailItem
    punch items    ->  PunchItem
    hold points    ->  HoldPointItem

Every cell is read as text (``dtype=str``) so the loader never guesses types;
counters are parsed later with ``parse_count`` (fallback 0).  String fields
of the drill-down feeds are trimmed here; case folding for joins happens in
``normalize_key`` at query time.

Failure policy
--------------
* Main feed: any network or parse failure raises ``DataLoadError``.  Nothing
  can be rendered without it.
* Item / punch / hold feeds: failures are logged and the dataset stays empty,
  so only drill-downs against that dataset lose content.

``load_main_state`` builds the initial ``AppState`` from the main feed alone.
``start_secondary_loads`` fetches the other three in a background thread pool
and ``apply_finished_loads`` swaps each finished dataset into its own slot.
``load_all`` does both and waits (CLI use).
"""

import io
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import pandas as pd
import requests
from tqdm import tqdm

from ..core.config import (
    REQUEST_TIMEOUT, LOAD_MAX_WORKERS, get_feed_urls,
    FEED_MAIN, FEED_ITEMS, FEED_PUNCH, FEED_HOLD,
    COL_SYSTEM, COL_SUBSYSTEM, COL_DISCIPLINE,
    COL_ITEM_SUBSYSTEM, COL_ITEM_DISCIPLINE, COL_ITEM_TAG, COL_ITEM_TYPE,
    COL_ITEM_DESCRIPTION, COL_ITEM_STATUS,
    COL_PUNCH_SUBSYSTEM, COL_PUNCH_CATEGORY, COL_PUNCH_DESCRIPTION,
    COL_HOLD_SUBSYSTEM, COL_HP_PRIORITY, COL_HP_DESCRIPTION, COL_HP_LOCATION,
)
from ..core.utils import clean_text, validate_columns
from ..models.data_models import (
    AppState, Dataset, DetailItem, HoldPointItem, ProcessedData, PunchItem, RawRow,
)
from ..analysis.hierarchy import build_hierarchy

logger = logging.getLogger(__name__)


class DataLoadError(ValueError):
    """A feed could not be fetched or parsed."""

    def __init__(self, feed, source, reason):
        self.feed = feed
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load {feed} feed from {source}: {reason}")


def _is_url(source) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def _read_csv_text(text) -> pd.DataFrame:
    """Parse CSV text as all-string columns; blank lines are skipped."""
    # A body holding only a BOM is an empty export
    if not text.lstrip('\ufeff').strip():
        return pd.DataFrame()
    df = pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    # A UTF-8 BOM survives requests' decoding and sticks to the first header
    df.columns = [str(c).lstrip('\ufeff') for c in df.columns]
    return df


def fetch_csv(source, feed="feed", timeout=None) -> pd.DataFrame:
    """Fetch one feed and return it as a DataFrame of strings.

    Args:
        source: http(s) URL or local file path.
        feed: Feed name used in log lines and errors.
        timeout: HTTP timeout in seconds (defaults to REQUEST_TIMEOUT).

    Raises:
        DataLoadError: On network errors, HTTP error status, unreadable files
                       or malformed CSV.
    """
    timeout = REQUEST_TIMEOUT if timeout is None else timeout
    logger.info(f"[{feed}] Fetching {source}")
    try:
        if _is_url(source):
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
            text = response.text
        else:
            text = Path(source).read_text(encoding='utf-8-sig')
        df = _read_csv_text(text)
    except requests.RequestException as e:
        raise DataLoadError(feed, source, e) from e
    except OSError as e:
        raise DataLoadError(feed, source, e) from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(feed, source, f"CSV parse error: {e}") from e

    logger.info(f"[{feed}] Parsed {len(df)} rows, {len(df.columns)} columns")
    return df


def _column(df, col):
    """Trimmed text values of ``col``; a missing column reads as all ''"""
    if col not in df.columns:
        return [""] * len(df)
    return [clean_text(v) for v in df[col].tolist()]


# ============================================================================
# MAIN FEED
# ============================================================================

def main_rows_from_frame(df) -> list:
    """Turn the main-feed DataFrame into RawRow records, order preserved."""
    validate_columns(df, [COL_SYSTEM, COL_SUBSYSTEM, COL_DISCIPLINE], feed=FEED_MAIN)
    return [RawRow.from_record(record) for record in df.to_dict('records')]


def load_main_data(source=None, timeout=None) -> ProcessedData:
    """Fetch the main summary feed and build the hierarchy from it.

    Raises:
        DataLoadError: The feed is unavailable or malformed.
    """
    source = source or get_feed_urls()[FEED_MAIN]
    df = fetch_csv(source, feed=FEED_MAIN, timeout=timeout)
    data = build_hierarchy(main_rows_from_frame(df))
    logger.info(
        f"[{FEED_MAIN}] {len(data.hierarchy.systems)} systems, "
        f"{len(data.hierarchy.subsystems)} subsystems, {len(data.raw_rows)} rows"
    )
    return data


# ============================================================================
# DRILL-DOWN FEEDS
# ============================================================================

def detail_items_from_frame(df) -> list:
    validate_columns(df, [COL_ITEM_SUBSYSTEM, COL_ITEM_DISCIPLINE, COL_ITEM_STATUS], feed=FEED_ITEMS)
    return [
        DetailItem(subsystem=sub, discipline=disc, tag_no=tag, type_code=typ,
                   description=desc, status=status)
        for sub, disc, tag, typ, desc, status in zip(
            _column(df, COL_ITEM_SUBSYSTEM),
            _column(df, COL_ITEM_DISCIPLINE),
            _column(df, COL_ITEM_TAG),
            _column(df, COL_ITEM_TYPE),
            _column(df, COL_ITEM_DESCRIPTION),
            _column(df, COL_ITEM_STATUS),
        )
    ]


def punch_items_from_frame(df) -> list:
    validate_columns(df, [COL_PUNCH_SUBSYSTEM, COL_ITEM_DISCIPLINE], feed=FEED_PUNCH)
    return [
        PunchItem(subsystem=sub, discipline=disc, tag_no=tag, type_code=typ,
                  punch_category=cat, punch_description=desc)
        for sub, disc, tag, typ, cat, desc in zip(
            _column(df, COL_PUNCH_SUBSYSTEM),
            _column(df, COL_ITEM_DISCIPLINE),
            _column(df, COL_ITEM_TAG),
            _column(df, COL_ITEM_TYPE),
            _column(df, COL_PUNCH_CATEGORY),
            _column(df, COL_PUNCH_DESCRIPTION),
        )
    ]


def hold_point_items_from_frame(df) -> list:
    validate_columns(df, [COL_HOLD_SUBSYSTEM, COL_ITEM_DISCIPLINE], feed=FEED_HOLD)
    return [
        HoldPointItem(subsystem=sub, discipline=disc, tag_no=tag, type_code=typ,
                      hp_priority=prio, hp_description=desc, hp_location=loc)
        for sub, disc, tag, typ, prio, desc, loc in zip(
            _column(df, COL_HOLD_SUBSYSTEM),
            _column(df, COL_ITEM_DISCIPLINE),
            _column(df, COL_ITEM_TAG),
            _column(df, COL_ITEM_TYPE),
            _column(df, COL_HP_PRIORITY),
            _column(df, COL_HP_DESCRIPTION),
            _column(df, COL_HP_LOCATION),
        )
    ]


def load_detailed_items(source=None, timeout=None) -> list:
    source = source or get_feed_urls()[FEED_ITEMS]
    return detail_items_from_frame(fetch_csv(source, feed=FEED_ITEMS, timeout=timeout))


def load_punch_items(source=None, timeout=None) -> list:
    source = source or get_feed_urls()[FEED_PUNCH]
    return punch_items_from_frame(fetch_csv(source, feed=FEED_PUNCH, timeout=timeout))


def load_hold_point_items(source=None, timeout=None) -> list:
    source = source or get_feed_urls()[FEED_HOLD]
    return hold_point_items_from_frame(fetch_csv(source, feed=FEED_HOLD, timeout=timeout))


_LOADERS = {
    FEED_MAIN: load_main_data,
    FEED_ITEMS: load_detailed_items,
    FEED_PUNCH: load_punch_items,
    FEED_HOLD: load_hold_point_items,
}

SECONDARY_DATASETS = (Dataset.ITEMS, Dataset.PUNCH, Dataset.HOLD)


# ============================================================================
# CONCURRENT LOAD
# ============================================================================

def _locations(sources=None) -> dict:
    locations = get_feed_urls()
    locations.update(sources or {})
    return locations


def load_secondary(dataset, source=None, timeout=None) -> tuple:
    """Load one drill-down dataset; a failure is logged and gives ()."""
    feed = dataset.value
    try:
        return tuple(_LOADERS[feed](source, timeout))
    except DataLoadError as e:
        # Secondary feeds only feed drill-downs; keep going without them
        logger.warning(f"{e}. {feed} drill-downs will be empty.")
        return ()


def load_main_state(sources=None, timeout=None) -> AppState:
    """Fetch the main feed only; the drill-down datasets start out pending.

    Raises:
        DataLoadError: The main feed failed.
    """
    locations = _locations(sources)
    try:
        data = _LOADERS[FEED_MAIN](locations[FEED_MAIN], timeout)
    except DataLoadError as e:
        logger.error(str(e))
        raise
    return AppState(data=data, pending=frozenset(SECONDARY_DATASETS))


def start_secondary_loads(sources=None, timeout=None) -> dict:
    """Submit the three drill-down feeds to a background pool.

    Returns:
        dict: Dataset -> Future resolving to a tuple of records.  The pool is
        shut down without waiting, so the caller is never blocked.
    """
    locations = _locations(sources)
    executor = ThreadPoolExecutor(max_workers=LOAD_MAX_WORKERS)
    futures = {
        dataset: executor.submit(load_secondary, dataset, locations[dataset.value], timeout)
        for dataset in SECONDARY_DATASETS
    }
    executor.shutdown(wait=False)
    return futures


def apply_finished_loads(state, futures) -> AppState:
    """Swap every finished, not yet applied dataset into ``state``."""
    for dataset, future in futures.items():
        if dataset in state.pending and future.done():
            state = state.with_dataset(dataset, future.result())
            logger.info(f"[{dataset.value}] {len(state.records_for(dataset))} records loaded")
    return state


def load_all(sources=None, timeout=None, show_progress=False) -> AppState:
    """Fetch all four feeds concurrently and wait for every one of them.

    Args:
        sources: Optional feed name -> location overrides; missing names fall
                 back to ``get_feed_urls()``.
        timeout: HTTP timeout per feed.
        show_progress: Draw a tqdm bar (CLI use).

    Raises:
        DataLoadError: Only when the main feed fails.
    """
    futures = start_secondary_loads(sources, timeout)
    completed = as_completed(futures.values())
    if show_progress:
        completed = tqdm(completed, total=len(futures), desc="Loading feeds", unit="feed")

    try:
        state = load_main_state(sources, timeout)
    finally:
        # Background fetches end before returning, even when the main feed failed
        for _ in completed:
            pass
    return apply_finished_loads(state, futures)
