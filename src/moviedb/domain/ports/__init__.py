from .cache import CachePort
from .language import (
    InvalidationCallback,
    LanguageChangeCoordinatorPort,
    LanguageProviderPort,
)
from .local_cache import LocalDataSourcePort
from .pagination_store import PaginationStateStorePort
from .remote import RawPage, RemoteDataSourcePort
from .settings_store import SettingsStorePort

__all__ = [
    "CachePort",
    "InvalidationCallback",
    "LanguageChangeCoordinatorPort",
    "LanguageProviderPort",
    "LocalDataSourcePort",
    "PaginationStateStorePort",
    "RawPage",
    "RemoteDataSourcePort",
    "SettingsStorePort",
]
