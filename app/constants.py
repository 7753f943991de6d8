import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(APP_DIR, 'data')
CONFIG_DIR = os.path.join(APP_DIR, 'config')
DB_FILE = os.path.join(DATA_DIR, 'catalog.db')
CONFIG_FILE = os.environ.get('CATALOG_CONFIG', os.path.join(CONFIG_DIR, 'settings.yaml'))

CATALOG_DB = 'sqlite:///' + DB_FILE

# Cache regions
REGION_LISTING = 'listing'
REGION_RECENT = 'recent'
REGION_UPCOMING = 'upcoming'
REGION_TOP_RATED = 'top-rated'
REGION_MOST_POPULAR = 'most-popular'
REGION_DETAIL = 'detail'
REGION_CATALOG = 'catalog'
REGION_SEARCH = 'search'

CACHE_REGIONS = (
    REGION_LISTING,
    REGION_RECENT,
    REGION_UPCOMING,
    REGION_TOP_RATED,
    REGION_MOST_POPULAR,
    REGION_DETAIL,
    REGION_CATALOG,
    REGION_SEARCH,
)

# Regions holding views derived from the game table
GAME_LISTING_REGIONS = (
    REGION_LISTING,
    REGION_RECENT,
    REGION_UPCOMING,
    REGION_TOP_RATED,
    REGION_MOST_POPULAR,
)

CACHE_TTL_SECONDS = 300
CACHE_MAX_ENTRIES = 500

# Interaction rules
SCORE_MIN = 1
SCORE_MAX = 10
REVIEW_MAX_LENGTH = 1000

# Association kinds
KIND_PLATFORM = 'platform'
KIND_DEVELOPER = 'developer'
KIND_GENRE = 'genre'
ASSOCIATION_KINDS = (KIND_PLATFORM, KIND_DEVELOPER, KIND_GENRE)

# Listing sizes
RECENT_LIMIT = 10
UPCOMING_LIMIT = 10
RANKING_DEFAULT_LIMIT = 10
RANKING_MAX_LIMIT = 100

BUILD_VERSION = '20261019_0900'

DEFAULT_SETTINGS = {
    "database": {
        "url": CATALOG_DB,
    },
    "cache": {
        "ttl_seconds": CACHE_TTL_SECONDS,
        "max_entries": CACHE_MAX_ENTRIES,
    },
    "listings": {
        "recent_limit": RECENT_LIMIT,
        "upcoming_limit": UPCOMING_LIMIT,
        "ranking_default_limit": RANKING_DEFAULT_LIMIT,
        "ranking_max_limit": RANKING_MAX_LIMIT,
    },
    "auth": {
        "user_header": "X-User-Id",
    },
}
