from prometheus_client import Counter

PLEDGE_CHARGES = Counter(
    "pledgeflow_pledge_charges_total",
    "Pledge charge attempts by outcome",
    ["outcome"],
)
PLEDGES_CANCELLED = Counter(
    "pledgeflow_pledges_cancelled_total",
    "Pending pledges cancelled by the expiration sweep",
)
PLEDGES_RECONCILED = Counter(
    "pledgeflow_pledges_reconciled_total",
    "Pledges marked charged from an existing Stripe payment",
)
CAMPAIGN_TRANSITIONS = Counter(
    "pledgeflow_campaign_transitions_total",
    "Campaign status changes by new status",
    ["status"],
)
BOOKKEEPING_FAILURES = Counter(
    "pledgeflow_bookkeeping_failures_total",
    "Status writes that failed and were only logged",
    ["table"],
)
