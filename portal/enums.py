from enum import Enum, auto


class Intent(Enum):
    """Command categories detected from user input."""
    ANALYZE = auto()          # analyze NVDA US
    SCREEN = auto()           # screen / screen top performers
    FILTER_MARKET = auto()    # filter market US
    FILTER_SECTOR = auto()    # filter sector Technology
    FILTER_RANGE = auto()     # filter pe max 20
    SORT = auto()             # sort pe asc
    RESET_FILTERS = auto()
    SHOW_PORTFOLIO = auto()
    SET_ALLOCATION = auto()   # set 2 30
    APPLY_PRESET = auto()     # preset aggressive
    SET_INITIAL = auto()      # invest 100000
    SET_MONTHLY = auto()      # monthly 2000
    SET_YEARS = auto()        # years 20
    SET_TARGET = auto()       # target 13.5
    HELP = auto()
    QUIT = auto()
    UNKNOWN = auto()


class RiskLevel(Enum):
    """Risk tier of an allocation entry."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SortOrder(Enum):
    """Screener sort direction."""
    ASC = "asc"
    DESC = "desc"


class Recommendation(Enum):
    """Badge shown next to a stock or thesis."""
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
