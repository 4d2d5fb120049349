import enum

class SaleState(str, enum.Enum):
    started = "STARTED"
    existence_checked = "EXISTENCE_CHECKED"
    stock_checked = "STOCK_CHECKED"
    decremented = "DECREMENTED"
    committed = "COMMITTED"
    rolled_back = "ROLLED_BACK"
