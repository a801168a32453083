"""
Engine Settings
===============

Status windows, the grade scale and logging. Only the log level is read
from the environment.
"""

import logging
import os
from datetime import date
from typing import Optional

# Days after the exam date at which the evaluation window starts / the exam closes
EVALUATION_AFTER_DAYS = 1
CLOSE_AFTER_DAYS = 5

# Grade scale in hundredths: 1.00 to 6.00 in quarter steps
MIN_GRADE_HUNDREDTHS = 100
MAX_GRADE_HUNDREDTHS = 600
GRADE_STEP_HUNDREDTHS = 25

LOG_FORMAT = '%(levelname)s: %(message)s'


def configure_logging(level: Optional[str] = None):
    """Applies the engine's log format. Level falls back to GRADE_TIPPS_LOG_LEVEL."""
    level = level or os.getenv("GRADE_TIPPS_LOG_LEVEL", "INFO")
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def today() -> date:
    """Current calendar date, for callers that thread it into the engine."""
    return date.today()
