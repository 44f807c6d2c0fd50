import logfire


def setup_logging(min_log_level: str = 'info', verbose: bool = False):
    """Configure logfire console output; spans are only shipped when a token is present."""
    logfire.configure(
        send_to_logfire='if-token-present',
        console=logfire.ConsoleOptions(min_log_level=min_log_level, verbose=verbose)
    )


class CrawlMetrics:
    """Metric instruments recorded by the fetch-and-validate worker."""

    def __init__(self):
        self.accepted = logfire.metric_counter(
            'webids_accepted',
            unit='1',
            description='Number of profiles carrying an OIDC issuer'
        )
        self.ignored = logfire.metric_counter(
            'webids_ignored',
            unit='1',
            description='Number of profiles without an OIDC issuer'
        )
        self.failed = logfire.metric_counter(
            'webids_failed',
            unit='1',
            description='Number of WebIDs that could not be fetched or parsed'
        )
        self.processing_time = logfire.metric_histogram(
            'webid_processing_time',
            unit='s',
            description='Time taken to fetch and validate one WebID'
        )
