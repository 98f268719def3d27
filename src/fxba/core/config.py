"""
Numerical and capacity constants shared across fxba.
"""

from __future__ import annotations

from typing import Final

# Newton-Raphson policy (TVM I/Y, IRR, bond yield)
MAX_ITERATIONS: Final = 50
TOLERANCE: Final = 1e-10
INITIAL_GUESS: Final = 0.1
RATE_LOWER_BOUND: Final = -0.999
RATE_UPPER_BOUND: Final = 10.0
DERIVATIVE_FLOOR: Final = 1e-15
BOND_YIELD_STEP: Final = 1e-6

# Fixed-capacity containers
MAX_CASH_FLOWS: Final = 32
MAX_FLOW_COUNT: Final = 9999
STAT_MAX_POINTS: Final = 50
MEMORY_SLOTS: Final = 10

# Input and display
INPUT_BUFFER_SIZE: Final = 16
MAX_INPUT_LENGTH: Final = INPUT_BUFFER_SIZE - 2
STO_RCL_TIMEOUT_MS: Final = 4000
TICK_MS: Final = 100

# TVM defaults
DEFAULT_P_Y: Final = 12.0
DEFAULT_C_Y: Final = 12.0

# Worksheet defaults
DEFAULT_BOND_REDEMPTION: Final = 100.0
DEFAULT_BOND_FREQUENCY: Final = 2
DEFAULT_DB_RATE: Final = 200.0
DEFAULT_DATE_1: Final = 20240101
DEFAULT_DATE_2: Final = 20241231
