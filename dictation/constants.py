"""
Central configuration constants for the Dictation simulation.

Defines default tuning values used when the data pack does not override
them, plus fixed names and units shared across modules.
"""

# ============================================================================
# Resources
# ============================================================================

# Tracked resource keys, in processing order
RESOURCE_NAMES = ('water', 'food', 'energy', 'population')

# Resources mined and consumed each day (population is handled by births)
CONSUMABLE_RESOURCES = ('water', 'food', 'energy')

# Display units for presenters
UNITS = {
    'water': 'L',        # liters
    'food': 'kg',        # kilograms
    'energy': 'J',       # joules
    'population': '',    # persons
    'angle': 'deg',
    'distance': 'Gm',    # gigameters
}


# ============================================================================
# Planet Dynamics
# ============================================================================

# Mining efficiency above bare need (fraction of daily requirement)
GAIN_FACTOR_DEFAULT = 0.001

# Birth-rate constant per day at productivity 1.0
BIRTH_RATE_DEFAULT = 1.05e-3

# Square-root comfort level below which people are thirsty / hungry
THIRST_FACTOR_DEFAULT = 0.5
HUNGER_FACTOR_DEFAULT = 0.5

# Fraction of population lost per day to dehydration / starvation
QUENCH_DIE_OFF_DEFAULT = 0.25
HUNGER_DIE_OFF_DEFAULT = 0.25

# Individuals lost per day regardless of birth rate
BASELINE_ATTRITION = 1


# ============================================================================
# Trade Configuration
# ============================================================================

# Fraction of cargo lost per gigameter travelled
TRANSFER_FACTOR_DEFAULT = 2.0e-6

# Transfers are specified per year, applied per day
DAYS_PER_YEAR = 365


# ============================================================================
# Reference Planet
# ============================================================================

# Canonical orbit of the reference planet (never advanced)
REFERENCE_ORBIT = {
    'gravity': 1.0,
    'distance': 1.0,
    'period': 1.0,
    'theta': 1.0,
}


# ============================================================================
# Performance Configuration
# ============================================================================

# Day timing window for rolling average
DAY_TIME_WINDOW = 100  # Number of days to average

# Default summary interval for batched advancing
DAY_SUMMARY_INTERVAL = 30  # Yield a summary every 30 days
