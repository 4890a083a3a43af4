# config.py
import os

# ======= Default board =======
COLS    = int(os.getenv("PT_COLS", "10"))
ROWS    = int(os.getenv("PT_ROWS", "10"))
START_X = int(os.getenv("PT_START_X", "0"))
START_Y = int(os.getenv("PT_START_Y", "0"))

# Either "knight" or an explicit list such as "1,2;2,1;-1,2".
MOVES = os.getenv("PT_MOVES", "knight")

# ======= Search knobs =======
ENABLE_CHECK = int(os.getenv("PT_ENABLE_CHECK", "1")) != 0   # dead-end pruning
ENGINE       = os.getenv("PT_ENGINE", "auto")                 # auto | recursive | iterative

# ======= Budgets (0 disables) =======
NODE_LIMIT = int(os.getenv("PT_NODE_LIMIT", "0"))
TIME_LIMIT = float(os.getenv("PT_TIME_LIMIT", "0"))

# Run each attempt in a spawned child so a timebox can be enforced hard.
ISOLATE = int(os.getenv("PT_ISOLATE", "0")) != 0

# ======= Progress / front-end guards =======
PROGRESS_EVERY = int(os.getenv("PT_PROGRESS_EVERY", "5000"))
MAX_CELLS      = int(os.getenv("PT_MAX_CELLS", "2500"))

# ======= Output names =======
TABLE_OUT   = os.getenv("PT_TABLE_OUT", "table.txt")
LAYOUT_HTML = os.getenv("PT_LAYOUT_HTML", "layout_view.html")

class CFG:
    COLS    = COLS
    ROWS    = ROWS
    START_X = START_X
    START_Y = START_Y
    MOVES   = MOVES

    ENABLE_CHECK = ENABLE_CHECK
    ENGINE       = ENGINE

    NODE_LIMIT = NODE_LIMIT
    TIME_LIMIT = TIME_LIMIT
    ISOLATE    = ISOLATE

    PROGRESS_EVERY = PROGRESS_EVERY
    MAX_CELLS      = MAX_CELLS

    TABLE_OUT   = TABLE_OUT
    LAYOUT_HTML = LAYOUT_HTML

__all__ = ["CFG"]
