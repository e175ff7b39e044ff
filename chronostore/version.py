# SPDX-FileCopyrightText: Chronostore Contributors
#
# SPDX-License-Identifier: MIT

"""Version information for chronostore package.

Examples
--------
>>> chronostore.__version__ # doctest: +SKIP
'0.1.0'
>>> chronostore.__version_base__ # doctest: +SKIP
'0.1.0'

"""

import logging
import re
from importlib.metadata import version

logger = logging.getLogger(__name__)

# e.g. "0.1.0" or "0.1.0.dev4+ga3890dc0" (if installed from git)
__version__ = version("chronostore")

# e.g. "0.1.0"
match = re.match(r"(\d+\.\d+(?:\.\d+)?(?:[a-z]+\d*)?)", __version__)
if not match:
    msg = f"Could not determine release_version of chronostore: {__version__}"
    raise ValueError(msg)

__version_base__ = match.group(0)
