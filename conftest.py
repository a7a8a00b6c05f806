# SPDX-License-Identifier: MIT
# Copyright (c) 2025 vault-sync contributors

"""Root conftest.py so vault_sync imports without an editable install."""

import sys
from pathlib import Path

_repo_root = Path(__file__).parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))
