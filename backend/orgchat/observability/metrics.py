"""
Prometheus Metrics for the messaging subsystem.

DEPENDENCY:
    pip install prometheus-client

METRIC TYPES:
    - Gauge: Value goes up/down (pending placeholders, active channels)
    - Counter: Value only goes up (sends, realtime events, mutations)
    - Histogram: Distribution (history load latency)

Exposition is left to the host process (prometheus_client.start_http_server
or an existing /metrics endpoint).
"""

from prometheus_client import Counter, Gauge, Histogram


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
MESSAGES_SENT = Counter(
    "chat_messages_sent_total",
    "Messages sent through the optimistic pipeline",
    ["outcome"],  # confirmed | rolled_back | rejected
)

PENDING_PLACEHOLDERS = Gauge(
    "chat_pending_placeholders",
    "Optimistic placeholders awaiting persistence",
)

REALTIME_EVENTS = Counter(
    "chat_realtime_events_total",
    "Change-feed events received by the active channel",
    ["kind", "outcome"],  # outcome: applied | ignored | stale
)

INSERT_RECONCILIATIONS = Counter(
    "chat_insert_reconciliations_total",
    "How inbound INSERT events were reconciled with the local list",
    ["strategy"],  # merge | client_id | heuristic | append
)

ACTIVE_CHANNELS = Gauge(
    "chat_active_channels",
    "Realtime channels currently subscribed",
)

HISTORY_LOAD_LATENCY = Histogram(
    "chat_history_load_seconds",
    "Latency of conversation history loads in seconds",
    ["outcome"],  # loaded | failed | discarded
    buckets=[0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10],
)

MUTATIONS = Counter(
    "chat_mutations_total",
    "Edit, soft delete and forward operations",
    ["operation", "outcome"],  # outcome: persisted | unsynced | rejected | failed
)
