"""
Store registry — builds the configured transaction store.

Supports the built-in stores by short name and custom stores by fully
qualified class path.
"""

from __future__ import annotations

import importlib
import logging

from bizledger.config import StoreConfig
from bizledger.errors import ConfigError
from bizledger.store.base import BaseTransactionStore

logger = logging.getLogger("bizledger.store.registry")

# Built-in store type mapping
_BUILTIN_STORES: dict[str, str] = {
    "memory": "bizledger.store.memory.InMemoryTransactionStore",
    "sql": "bizledger.store.sql.SQLTransactionStore",
}


def create_store(config: StoreConfig) -> BaseTransactionStore:
    """Instantiate the store described by ``config``.

    Raises:
        ConfigError: The store class cannot be imported or constructed.
    """
    store_path = _BUILTIN_STORES.get(config.type, config.type)

    try:
        module_path, class_name = store_path.rsplit(".", 1)
        module = importlib.import_module(module_path)
        store_cls = getattr(module, class_name)
    except (ImportError, AttributeError, ValueError) as e:
        logger.error("Cannot load store '%s': %s", config.type, e)
        raise ConfigError(f"Unknown store type '{config.type}'") from e

    if not (isinstance(store_cls, type) and issubclass(store_cls, BaseTransactionStore)):
        raise ConfigError(f"'{store_path}' is not a BaseTransactionStore")

    kwargs = dict(config.options)
    if store_cls.name == "sql" or config.url:
        kwargs.setdefault("url", config.url)
        kwargs.setdefault("max_retries", config.max_retries)
        kwargs.setdefault("retry_backoff", config.retry_backoff)
        kwargs.setdefault("retry_on", config.retry_on)

    try:
        store = store_cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Cannot create store '{config.type}': {e}") from e

    logger.info("Using %s store", store.name)
    return store
