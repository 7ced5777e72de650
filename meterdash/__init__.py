from . import (
    canon,
    exceptions,
    types,
    utils,
    validate,
    ingest,
    store,
    filters,
    aggregate,
    charts,
    config,
    fetch,
    orchestrator,
)

__all__ = [
    "canon",
    "exceptions",
    "types",
    "utils",
    "validate",
    "ingest",
    "store",
    "filters",
    "aggregate",
    "charts",
    "config",
    "fetch",
    "orchestrator",
]
