"""Prometheus metrics for the application"""
from prometheus_client import Counter, REGISTRY


def _counter(name, documentation, labelnames=()):
    # Module reloads in tests re-register the same collector names
    try:
        return Counter(name, documentation, labelnames)
    except ValueError:
        return REGISTRY._names_to_collectors.get(name)


# Access policy metrics
access_decisions_counter = _counter(
    'lessonhub_access_decisions_total',
    'Total number of gated-content access decisions',
    ['result', 'reason']
)

# Coach resolver metrics
coach_resolution_counter = _counter(
    'lessonhub_coach_resolutions_total',
    'Total number of coach resolutions by the tier that produced the result',
    ['tier']
)

# Store metrics
store_errors_counter = _counter(
    'lessonhub_store_errors_total',
    'Total number of document store errors',
    ['kind']
)

# Admin metrics
admin_actions_counter = _counter(
    'lessonhub_admin_actions_total',
    'Total number of administrative mutations',
    ['action']
)

# Auth metrics
token_verifications_counter = _counter(
    'lessonhub_token_verifications_total',
    'Total number of bearer token verifications',
    ['status']
)
