#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
from datetime import datetime

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from prettyval.printer import Printer

NOW = datetime(2023, 6, 15, 12, 0, 0)


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def now() -> datetime:
    """Fixed reference instant for relative time assertions."""
    return NOW


@pytest.fixture
def plain(now) -> Printer:
    """Printer without colors and with a fixed reference instant."""
    return Printer(color_mode="never").with_now(now)


@pytest.fixture
def colored(now) -> Printer:
    """Printer that always emits ANSI colors."""
    return Printer(color_mode="always").with_now(now)
