"""
===========================================================
config.py
Author: Veronica Scerra
Last Updated: 2026-10-16
===========================================================
Process-level settings.

Model settings live in parameters.SIRConfig; this module only
holds values that depend on the machine running the code.

License: MIT
===========================================================
"""

import os
from math import floor
from multiprocessing import cpu_count

#: Number of worker processes used by ensemble runs when no explicit
#: count is given. Can be set via the environment variable *POOL_NCORES*.
POOL_NCORES = int(os.environ.get('POOL_NCORES', max(1, floor(.75 * cpu_count()))))
