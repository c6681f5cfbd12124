from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_SUBMISSIONS_DIR = DATA_DIR / "raw"
RESULTS_DIR = DATA_DIR / "results"

# Ladder matching
DEFAULT_SUBGROUP_SIZE = 4
DEFAULT_GROUP_NAMES = [chr(c) for c in range(ord("A"), ord("Z") + 1)]

# Noise variance. High and low refer to the meritocracy level, not the noise.
DEFAULT_NOISE_HIGH = 2.0
DEFAULT_NOISE_LOW = 8.0

# Public-goods payoff
DEFAULT_GROUP_ACCOUNT_DIVIDER = 2.0
DEFAULT_INITIAL_COINS = 10.0  # Per-round endowment

# Treatments where players also submit a demand alongside their contribution
DEMAND_TRACKING_TREATMENTS = {"endo_high", "endo_low"}

# Key under which contributions are recorded in the raw submission log
SUBMISSION_KEY = "bid"

# Marker for statistics that are undefined or not tracked
NOT_AVAILABLE = "NA"
