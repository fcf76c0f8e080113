from .categories import (
    ContentCategory,
    MovieCategory,
    SearchCategory,
    SearchFilter,
    TvShowCategory,
    category_from_key,
)
from .media import (
    CastMember,
    FilmographyCredit,
    Movie,
    MovieDetails,
    MovieItem,
    PersonDetails,
    PersonItem,
    SearchResultItem,
    TvShow,
    TvShowDetails,
    TvShowItem,
    Video,
)
from .pagination import (
    CachedEntity,
    CategoryState,
    LoadStatus,
    PageLoad,
    PaginationCursor,
)
from .result import AppResult, Failure, Success
from .settings import AppLanguage, AppTheme

__all__ = [
    "AppLanguage",
    "AppResult",
    "AppTheme",
    "CachedEntity",
    "CastMember",
    "CategoryState",
    "ContentCategory",
    "Failure",
    "FilmographyCredit",
    "LoadStatus",
    "Movie",
    "MovieCategory",
    "MovieDetails",
    "MovieItem",
    "PageLoad",
    "PaginationCursor",
    "PersonDetails",
    "PersonItem",
    "SearchCategory",
    "SearchFilter",
    "SearchResultItem",
    "Success",
    "TvShow",
    "TvShowCategory",
    "TvShowDetails",
    "TvShowItem",
    "Video",
    "category_from_key",
]
