from __future__ import annotations

from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

# typing only
FloatArray: TypeAlias = NDArray[np.floating]
IntArray: TypeAlias = NDArray[np.integer]
