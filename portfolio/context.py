from __future__ import annotations

from typing import Any, Dict

from portfolio.data import PortfolioStore, performance_frame
from portfolio.forecast import attach_forecasts
from portfolio.settings import DashboardSettings


def prepare_context(settings: DashboardSettings, store: PortfolioStore) -> Dict[str, Any]:
    """Derive everything the pages need from the current working set.

    Nothing is cached; the payloads are recomputed from the store each time.
    """
    return {
        "properties": attach_forecasts(store.frame, settings.forecast_years),
        "performance": performance_frame(),
        "source": store.source,
        "source_name": store.source_name,
    }
