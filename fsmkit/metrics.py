"""
Prometheus metrics shared by every state machine in the process.

Collectors are registered once in the default registry and labelled by
machine name, so any number of machines can be created without clashing.
"""

from prometheus_client import Counter, Histogram


# Label value for rejected events the machine's configuration never mentions
UNKNOWN_EVENT = '__unknown__'


TRANSITIONS = Counter(
    'fsmkit_transitions_total',
    'Total state transitions',
    labelnames=['machine', 'from_state', 'to_state', 'event']
)

REJECTED_EVENTS = Counter(
    'fsmkit_rejected_events_total',
    'Events rejected because no transition was mapped',
    labelnames=['machine', 'state', 'event']
)

RESETS = Counter(
    'fsmkit_resets_total',
    'Resets back to the initial state',
    labelnames=['machine']
)

TRANSITION_LATENCY = Histogram(
    'fsmkit_transition_latency_seconds',
    'Latency of state transitions, including hooks',
    labelnames=['machine', 'from_state', 'to_state'],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1)
)

STATE_DURATION = Histogram(
    'fsmkit_state_duration_seconds',
    'Time spent in each state',
    labelnames=['machine', 'state'],
    buckets=(0.1, 0.5, 1, 5, 10, 30, 60, 120, 300, 600)
)
