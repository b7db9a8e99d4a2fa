"""Best-effort analytics for completed calculations.

Events go to a Supabase-style REST table on a background thread. Nothing
here can fail or delay a calculation: submission errors are logged and
dropped. The engine modules never import this one.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

import httpx

from bondcalc.params import ComparisonInput
from bondcalc.settings import Settings

logger = logging.getLogger(__name__)

RESULT_GENERATED = "result_generated"


def build_event(event_name: str, inputs: ComparisonInput) -> dict:
    """Event row in the calculator events table's column names."""
    return {
        "event_name": event_name,
        "purchase_price": inputs.purchase_price,
        "deposit_amount": inputs.deposit_amount,
        "interest_rate": inputs.annual_interest_rate,
        "loan_term_years": inputs.loan_term_years,
        "opportunity_rate": inputs.opportunity_rate,
        "include_onceoff_in_loan": inputs.include_once_off_in_loan,
    }


class AnalyticsSink:
    """Inserts event rows into one table of a PostgREST endpoint."""

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        table: str = "bond_vs_cash_calculator_events",
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        headers = {"Prefer": "return=minimal"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.Client(headers=headers, timeout=timeout, transport=transport)

    def send(self, event: dict) -> None:
        response = self._client.post(self.endpoint, json=[event])
        response.raise_for_status()

    def close(self) -> None:
        self._client.close()


class TelemetryRecorder:
    """Fire-and-forget submission of events to an optional sink."""

    def __init__(self, sink: AnalyticsSink | None = None):
        self.sink = sink
        self._executor = (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="telemetry")
            if sink is not None
            else None
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryRecorder":
        if not settings.analytics_url:
            return cls()
        return cls(
            AnalyticsSink(
                settings.analytics_url,
                api_key=settings.analytics_key,
                table=settings.analytics_table,
                timeout=settings.analytics_timeout_seconds,
            )
        )

    @property
    def enabled(self) -> bool:
        return self._executor is not None

    def record(self, event_name: str, inputs: ComparisonInput) -> Future | None:
        """Queue an event and return immediately."""
        if self._executor is None:
            return None
        try:
            return self._executor.submit(self._send, build_event(event_name, inputs))
        except RuntimeError as exc:  # executor already shut down
            logger.warning("Analytics event %s not queued: %s", event_name, exc)
            return None

    def _send(self, event: dict) -> None:
        try:
            self.sink.send(event)
        except Exception as exc:
            logger.warning("Analytics submission failed for %s: %s", event["event_name"], exc)
        else:
            logger.debug("Analytics event %s submitted", event["event_name"])

    def close(self) -> None:
        """Wait for queued events, then release the HTTP client."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self.sink is not None:
            self.sink.close()

    def __enter__(self) -> "TelemetryRecorder":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
