DEFAULT_RATING = 1000
K_FACTOR = 32

# Event log retention, applied on every append.
MAX_EVENTS = 200
MAX_AGE_MS = 30 * 24 * 60 * 60 * 1000  # 30 days

CONFIG_FILENAME = ".elocompare.yml"
