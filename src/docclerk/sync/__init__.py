"""Sync domain — remote fetch, config store and the update controller."""

from docclerk.sync.autodocs import AutodocsRegistry
from docclerk.sync.config_store import ConfigStore, FileConfigStore
from docclerk.sync.controller import Indexer, UpdateResult
from docclerk.sync.remote import HttpFetcher, describe_remote_error, get_remote_json
from docclerk.sync.store import IndexStore

__all__ = [
    "AutodocsRegistry",
    "ConfigStore",
    "FileConfigStore",
    "HttpFetcher",
    "IndexStore",
    "Indexer",
    "UpdateResult",
    "describe_remote_error",
    "get_remote_json",
]
