from pathlib import Path
from dotenv import load_dotenv
import logging
import pytest

# Load environment variables for tests
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')


@pytest.fixture(autouse=True)
def debug_pricing_logs(caplog):
    """Capture engine debug logs so branch decisions show up on failures."""
    caplog.set_level(logging.DEBUG, logger="studio_pricing")
    return caplog
