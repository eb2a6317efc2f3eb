from .run_suite import RunSuite
from .run_workload import RunWorkload
from .search_results import SearchResults
from .sync_results import SyncResults

__all__ = [
    "RunSuite",
    "RunWorkload",
    "SearchResults",
    "SyncResults",
]
