MAX_LEVEL = 7
MIN_LEVEL = 0
INTERVAL_DAYS = (1, 1, 2, 3, 5, 8, 13, 21)  # Fibonacci spacing, indexed by level
RETENTION_PERCENT = (25, 40, 60, 70, 80, 85, 90, 95)

# Bucket windows, counted in whole days after the end of today
WEEK_WINDOW_DAYS = 6
MONTH_WINDOW_DAYS = 30

WEEK_STARTS_ON = 0  # Monday, as in datetime.weekday()
