STEPS_PER_MILE = 2000
TOTAL_JOURNEY_MILES = 1779  # Bag End to Mount Doom

MANUAL_SOURCE = "manual"
APPLE_HEALTH_SOURCE = "apple_health"
STEP_SOURCES = frozenset({MANUAL_SOURCE, APPLE_HEALTH_SOURCE, "apple_watch", "fitbit", "google_fit"})

# one day's count; anything above is a device or client bug
MAX_DAILY_STEPS = 1_000_000
