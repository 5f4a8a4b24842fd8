"""
Garden simulation constants.

Tuning values for the synthetic irrigation environment. They are fixed:
nothing reads them from the environment.
"""

# ==========================================
# STATE RANGES (closed intervals)
# ==========================================

SOIL_MOISTURE_RANGE = (5.0, 95.0)       # %
AIR_TEMPERATURE_RANGE = (14.0, 35.0)    # °C
LIGHT_LEVEL_RANGE = (50.0, 1200.0)      # lux
TANK_LEVEL_RANGE = (0.0, 100.0)         # %

# ==========================================
# INITIAL STATE
# ==========================================

INITIAL_SOIL_MOISTURE = 55.0
INITIAL_AIR_TEMPERATURE = 22.0
INITIAL_LIGHT_LEVEL = 300.0
INITIAL_TANK_LEVEL = 80.0

# ==========================================
# DAYLIGHT CYCLE
# ==========================================

# d = sin(tick / DAYLIGHT_HALF_PERIOD_TICKS * pi) * 0.5 + 0.5
DAYLIGHT_HALF_PERIOD_TICKS = 180

LIGHT_BASE = 100.0
LIGHT_DAYLIGHT_SPAN = 900.0
LIGHT_NOISE = 20.0

TEMPERATURE_BASE = 18.0
TEMPERATURE_DAYLIGHT_SPAN = 10.0
TEMPERATURE_NOISE = 1.0

# ==========================================
# SOIL / PUMP / TANK
# ==========================================

SOIL_MOISTURE_NOISE = 1.5

PUMP_MOISTURE_THRESHOLD = 30.0   # pump when moisture strictly below
PUMP_MIN_TANK_LEVEL = 10.0       # and tank strictly above
PUMP_MOISTURE_BOOST = 6.0
PUMP_TANK_DRAW = 1.2

TANK_IDLE_NOISE = 0.2

# ==========================================
# ALERTS
# ==========================================

ALERT_TANK_BELOW = 10.0
ALERT_TEMPERATURE_BELOW = 15.0
ALERT_TEMPERATURE_ABOVE = 32.0

# ==========================================
# EXPORTED METRICS
# ==========================================

SOIL_MOISTURE_METRIC = "garden_soil_moisture_percent"
AIR_TEMPERATURE_METRIC = "garden_air_temperature_celsius"
LIGHT_LEVEL_METRIC = "garden_light_lux"
TANK_LEVEL_METRIC = "garden_tank_level_percent"
PUMP_ON_METRIC = "garden_pump_on"
PUMP_CYCLES_METRIC = "garden_pump_cycles_total"
ALERTS_METRIC = "garden_alerts_total"

# Order is the registration order and the JSON snapshot order
GARDEN_METRIC_NAMES = (
    SOIL_MOISTURE_METRIC,
    AIR_TEMPERATURE_METRIC,
    LIGHT_LEVEL_METRIC,
    TANK_LEVEL_METRIC,
    PUMP_ON_METRIC,
    PUMP_CYCLES_METRIC,
    ALERTS_METRIC,
)
