"""
===============================================================================
QUATLIB - Numeric Constants and Default Tolerances
===============================================================================
Central repository for the thresholds used throughout the quaternion
algebra. Every value here is a default: the tolerance-taking methods accept
an override, and config.NumericConfig can replace them from YAML.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
HALF_PI = 0.5 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# =============================================================================
# INTERPOLATION
# =============================================================================
# Above this cosine the two quaternions are treated as parallel and slerp
# falls back to normalized linear interpolation.
SLERP_LINEAR_THRESHOLD = 0.9995

# =============================================================================
# COMPARISON TOLERANCES
# =============================================================================
UNIT_TOLERANCE = 1e-8                  # |q| - 1 for is_unit()
COMPARISON_TOLERANCE = 1e-9            # absolute, for Quaternion.isclose()

# =============================================================================
# DISPLAY
# =============================================================================
DEFAULT_PRECISION = 6                  # decimal places in CLI output
