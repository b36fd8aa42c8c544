"""Named thresholds for anomaly detection, pattern analysis, forecasting and alerts"""

# Category profiles
MIN_PROFILE_TRANSACTIONS = 3

# Amount outliers
AMOUNT_SCAN_LIMIT = 50
AMOUNT_Z_THRESHOLD = 3.0
AMOUNT_Z_HIGH = 4.0
AMOUNT_Z_CRITICAL = 5.0
AMOUNT_SCORE_PER_Z = 10
AMOUNT_FRAUD_MULTIPLIER = 10.0  # amount / category mean
AMOUNT_FRAUD_MAX_FACTOR = 2.0  # amount / category max

# Time-of-day outliers
TIME_SCAN_LIMIT = 50
TIME_MIN_HOUR_SAMPLES = 5
NIGHT_START_HOUR = 23
NIGHT_END_HOUR = 5  # exclusive
DEEP_NIGHT_START_HOUR = 2
TIME_USUAL_NIGHT_PERCENT = 20.0
TIME_SCORE_FACTOR = 0.8
TIME_FRAUD_MEAN_FACTOR = 2.0

# Frequency bursts
FREQUENCY_SCAN_LIMIT = 100
FREQUENCY_WINDOW_HOURS = 24
FREQUENCY_MIN_COUNT = 5
FREQUENCY_RATE_MULTIPLIER = 3.0
FREQUENCY_HIGH_COUNT = 7
FREQUENCY_CRITICAL_COUNT = 10
FREQUENCY_SCORE_PER_TXN = 10

# Duplicate charges
DUPLICATE_SCAN_LIMIT = 100
DUPLICATE_WINDOW_MINUTES = 5
DUPLICATE_SCORE = 90

# Behavioral shift
BEHAVIOR_RECENT_DAYS = 7
BEHAVIOR_LOOKBACK_DAYS = 30
BEHAVIOR_BASELINE_DAYS = BEHAVIOR_LOOKBACK_DAYS - BEHAVIOR_RECENT_DAYS
BEHAVIOR_MIN_RECENT = 5
BEHAVIOR_MIN_BASELINE = 10
BEHAVIOR_CHANGE_PERCENT = 50.0
BEHAVIOR_CRITICAL_PERCENT = 100.0
BEHAVIOR_FRAUD_PERCENT = 200.0

# Report aggregation
REPORT_MAX_ANOMALIES = 10
RISK_WEIGHT_CRITICAL = 30
RISK_WEIGHT_HIGH = 20
RISK_WEIGHT_FRAUD = 25
RISK_WEIGHT_ANY = 2
RISK_HIGH = 70
RISK_MEDIUM = 40
RISK_LOW = 20

# Historical patterns
PERIOD_TREND_PERCENT = 10.0
CATEGORY_MIN_TRANSACTIONS = 3
CATEGORY_MIN_MONTHS = 2
CATEGORY_TREND_WINDOW = 3  # months
CATEGORY_TREND_PERCENT = 15.0
SEASONALITY_HIGH_CV = 50.0
SEASONALITY_LOW_CV = 25.0
YEAR_OVER_YEAR_PERCENT = 20.0

# Forecast
FORECAST_MONTHS = 3
FORECAST_INCREASE_FACTOR = 1.1
FORECAST_DECREASE_FACTOR = 0.9
FORECAST_RANGE_LOW = 0.85
FORECAST_RANGE_HIGH = 1.15

# Alerts
BUDGET_WARNING_PERCENT = 80.0
BUDGET_EXCEEDED_PERCENT = 100.0
GOAL_ALMOST_PERCENT = 90.0
GOAL_ACHIEVED_PERCENT = 100.0
RUNWAY_ALERT_DAYS = 3  # balance / average daily spend
LATE_NIGHT_START_HOUR = 21
LATE_NIGHT_END_HOUR = 6  # exclusive
LATE_NIGHT_MIN_PURCHASES = 3
