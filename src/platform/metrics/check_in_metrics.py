from prometheus_client import Counter, Gauge, Histogram


class CheckInMetrics:
    """
    Gate Check-In Metrics Collector

    Tracks attempt outcomes per error kind, attempt latency and transient
    persistence failures
    """

    def __init__(self):
        # ========== Check-In Attempt Metrics ==========
        self.check_in_attempts = Counter(
            'check_in_attempts_total',
            'Total check-in attempts by outcome',
            ['method', 'outcome'],  # outcome: success or the error kind
        )

        self.check_in_attempt_duration = Histogram(
            'check_in_attempt_duration_seconds',
            'Resolve + validate + commit duration',
            ['method'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
        )

        # ========== Persistence Metrics ==========
        self.check_in_transient_failures = Counter(
            'check_in_transient_failures_total',
            'Persistence timeouts and errors seen by check-in operations',
            ['operation', 'reason'],  # operation: resolve/commit, reason: timeout/error
        )

        self.check_in_commit_conflicts = Counter(
            'check_in_commit_conflicts_total',
            'Conditional writes that lost to a concurrent check-in',
        )

        # ========== Session Metrics ==========
        self.check_in_sessions_processing = Gauge(
            'check_in_sessions_processing',
            'Operator sessions with an attempt in flight',
        )

        self.check_in_scans_ignored = Counter(
            'check_in_scans_ignored_total',
            'Scans dropped because the session was not ready',
        )

    # ========== Helper Methods ==========

    def record_attempt(self, *, method: str, outcome: str, duration: float):
        self.check_in_attempts.labels(method=method, outcome=outcome).inc()
        self.check_in_attempt_duration.labels(method=method).observe(duration)

    def record_transient_failure(self, *, operation: str, reason: str):
        self.check_in_transient_failures.labels(operation=operation, reason=reason).inc()

    def record_commit_conflict(self):
        self.check_in_commit_conflicts.inc()


# Global metrics instance
metrics = CheckInMetrics()
