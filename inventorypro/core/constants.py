MOVEMENT_ADJUSTMENT = "adjustment"
MOVEMENT_BULK_UPDATE = "bulk_update"
MOVEMENT_SALE = "sale"
MOVEMENT_PURCHASE = "purchase"
MOVEMENT_RETURN = "return"

MOVEMENT_TYPES = (
    MOVEMENT_ADJUSTMENT,
    MOVEMENT_BULK_UPDATE,
    MOVEMENT_SALE,
    MOVEMENT_PURCHASE,
    MOVEMENT_RETURN,
)
# Reasons an operator may pick for a single adjustment; bulk_update is
# reserved for batch writes.
ADJUSTMENT_TYPES = (
    MOVEMENT_ADJUSTMENT,
    MOVEMENT_SALE,
    MOVEMENT_PURCHASE,
    MOVEMENT_RETURN,
)

STATUS_IN_STOCK = "in_stock"
STATUS_LOW_STOCK = "low_stock"
STATUS_OUT_OF_STOCK = "out_of_stock"

UNCATEGORIZED_LABEL = "Uncategorized"

NOTES_MAX_LENGTH = 500
CATEGORY_NAME_MAX_LENGTH = 120
MOVEMENT_LIST_MAX_LIMIT = 500
TOP_PRODUCTS_DEFAULT_LIMIT = 5
# Largest quantity a 32-bit INTEGER column holds on every supported backend.
QUANTITY_MAX = 2**31 - 1
