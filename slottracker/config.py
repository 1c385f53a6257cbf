"""SlotTracker configuration loaded from environment variables."""
import os
from typing import List, Optional
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# ============================================================================
# Simulation Configuration
# ============================================================================

ACTIVE_SLOTS: List[str] = [
    s.strip() for s in os.getenv('ACTIVE_SLOTS', 'book-of-dead,razor-shark').split(',')
    if s.strip()
]

DEFAULT_STAKE = float(os.getenv('DEFAULT_STAKE', '1.0'))
STAKE_OPTIONS: List[float] = [
    float(s) for s in os.getenv(
        'STAKE_OPTIONS',
        '0.1,0.2,0.5,1.0,2.0,5.0,10.0,50.0,100.0'
    ).split(',')
]

BATCH_SIZE = int(os.getenv('BATCH_SIZE', '100'))
TICK_INTERVAL = float(os.getenv('TICK_INTERVAL', '1.0'))

# Rolling window capacities for charting
HISTORY_WINDOW = int(os.getenv('HISTORY_WINDOW', '100'))
RTP_WINDOW = int(os.getenv('RTP_WINDOW', '30'))

# Unset means an unseeded generator
SIM_SEED = int(os.getenv('SIM_SEED')) if os.getenv('SIM_SEED') else None

# ============================================================================
# AI Commentary Configuration
# ============================================================================

GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')
GEMINI_API_URL = os.getenv(
    'GEMINI_API_URL',
    'https://generativelanguage.googleapis.com/v1beta/models'
)
COMMENTARY_TIMEOUT = float(os.getenv('COMMENTARY_TIMEOUT', '15'))

# Mock commentary whenever no key is configured
MOCK_COMMENTARY = bool(int(os.getenv('MOCK_COMMENTARY', '0' if GEMINI_API_KEY else '1')))

# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_FILE = os.getenv('LOG_FILE', '')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'detailed')
LOG_FORMATS = {
    'detailed': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'simple': '%(levelname)s: %(message)s',
}

# ============================================================================
# Validation
# ============================================================================

def validate_config() -> None:
    """Validate configuration values."""
    errors = []

    if DEFAULT_STAKE <= 0:
        errors.append("DEFAULT_STAKE must be positive")

    if any(s <= 0 for s in STAKE_OPTIONS):
        errors.append("STAKE_OPTIONS must all be positive")

    if BATCH_SIZE < 1:
        errors.append("BATCH_SIZE must be at least 1")

    if TICK_INTERVAL <= 0:
        errors.append("TICK_INTERVAL must be positive")

    if HISTORY_WINDOW < 1:
        errors.append("HISTORY_WINDOW must be at least 1")

    if RTP_WINDOW < 1:
        errors.append("RTP_WINDOW must be at least 1")

    if COMMENTARY_TIMEOUT <= 0:
        errors.append("COMMENTARY_TIMEOUT must be positive")

    if LOG_FORMAT not in LOG_FORMATS:
        errors.append("LOG_FORMAT must be detailed or simple")

    if errors:
        raise ValueError(f"Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors))


# ============================================================================
# Logging Setup
# ============================================================================


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging from LOG_LEVEL / LOG_FORMAT / LOG_FILE.

    Args:
        level: Optional override of LOG_LEVEL (used by the live runner's --log-level)
    """
    import logging
    import sys

    level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMATS.get(LOG_FORMAT, LOG_FORMATS['detailed']))

    handlers = [logging.StreamHandler(sys.stdout)]
    if LOG_FILE:
        handlers.append(logging.FileHandler(LOG_FILE))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.getLogger('slottracker').setLevel(level)

    # Dashboard polling hits the stats routes every tick
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


# ============================================================================
# Initialization
# ============================================================================

validate_config()

setup_logging()
