# checkout/services/result_reporter.py
from typing import Iterable

from checkout.domain.checkout import CheckoutReport, FailedPayment, LegOutcome, SuccessfulPayment


class ResultReporter:
    """Składa wyniki wszystkich nóg w jeden raport dla wołającego."""

    def build(self, outcomes: Iterable[LegOutcome]) -> CheckoutReport:
        report = CheckoutReport()

        for outcome in outcomes:
            if outcome.succeeded:
                report.successful_payments.append(
                    SuccessfulPayment(
                        order_id=outcome.order_id,
                        seller_id=outcome.seller_id,
                        seller_name=outcome.seller_name,
                        amount_cents=outcome.amount_cents,
                        external_transaction_id=outcome.external_transaction_id,
                        status=outcome.status,
                    )
                )
            else:
                report.failed_payments.append(
                    FailedPayment(
                        seller_id=outcome.seller_id,
                        seller_name=outcome.seller_name,
                        error_message=outcome.error_message or "Unknown error",
                    )
                )

        return report
