"""Scheduled transaction domain service."""

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from dmxmoney.database.base import Database
from dmxmoney.domain.entities import ScheduledRun, ScheduledTransaction, Transaction
from dmxmoney.domain.errors import ValidationError
from dmxmoney.domain.transaction import TRANSFER_CATEGORY

logger = logging.getLogger(__name__)

ONCE = "once"
TRANSFER_TYPE = "transfer"

# How far each frequency moves nextDate; unknown frequencies repeat monthly
FREQUENCY_STEPS = {
    "daily": relativedelta(days=1),
    "weekly": relativedelta(weeks=1),
    "biweekly": relativedelta(weeks=2),
    "bimonthly": relativedelta(days=15),
    "fourweekly": relativedelta(weeks=4),
    "monthly": relativedelta(months=1),
    "bimestrial": relativedelta(months=2),
    "quarterly": relativedelta(months=3),
    "fourmonthly": relativedelta(months=4),
    "semiannual": relativedelta(months=6),
    "annual": relativedelta(years=1),
    "biennial": relativedelta(years=2),
}
DEFAULT_STEP = relativedelta(months=1)


def parse_schedule_date(value: str, scheduled_id: str, field_name: str) -> date:
    """Parse an ISO date stored on a scheduled transaction.

    Raises:
        ValidationError: If the value is not an ISO date
    """
    try:
        return date_parser.isoparse(value).date()
    except (ValueError, TypeError) as e:
        raise ValidationError(
            f"Scheduled transaction '{scheduled_id}' has an invalid {field_name}: {value!r}"
        ) from e


def next_occurrence(current: date, frequency: str) -> date:
    """Return the occurrence following ``current`` for ``frequency``."""
    return current + FREQUENCY_STEPS.get(frequency, DEFAULT_STEP)


def occurrence_transactions(
    scheduled: ScheduledTransaction, occurrence: str
) -> list[Transaction]:
    """Build the transaction(s) for one occurrence of a scheduled transaction.

    A scheduled transfer with a destination account yields two linked legs;
    everything else yields a single transaction copying the schedule.
    """
    transaction_id = str(uuid.uuid4())

    if scheduled.type == TRANSFER_TYPE and scheduled.to_account_id:
        linked_id = str(uuid.uuid4())
        return [
            Transaction(
                id=transaction_id,
                date=occurrence,
                account_id=scheduled.account_id,
                type="expense",
                amount=scheduled.amount,
                category=TRANSFER_CATEGORY,
                description=scheduled.description,
                is_transfer=True,
                linked_transaction_id=linked_id,
            ),
            Transaction(
                id=linked_id,
                date=occurrence,
                account_id=scheduled.to_account_id,
                type="income",
                amount=scheduled.amount,
                category=TRANSFER_CATEGORY,
                description=scheduled.description,
                is_transfer=True,
                linked_transaction_id=transaction_id,
            ),
        ]

    return [
        Transaction(
            id=transaction_id,
            date=occurrence,
            account_id=scheduled.account_id,
            type=scheduled.type,
            amount=scheduled.amount,
            category=scheduled.category,
            description=scheduled.description,
        )
    ]


class ScheduledService:
    """Service for managing scheduled (recurring) transactions."""

    def __init__(self, db: Database):
        """Initialize scheduled transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_scheduled(self) -> list[ScheduledTransaction]:
        """List all scheduled transactions."""
        return self.db.list_scheduled()

    def create_scheduled(self, scheduled: ScheduledTransaction) -> None:
        """Create a scheduled transaction.

        Args:
            scheduled: Scheduled transaction to store

        Raises:
            ConflictError: If the id already exists
            DependencyError: If the account does not exist
        """
        logger.debug("Creating scheduled transaction %s", scheduled.id)
        self.db.create_scheduled(scheduled)

    def update_scheduled(self, scheduled: ScheduledTransaction) -> None:
        """Replace every field of the scheduled transaction with the same id."""
        logger.debug("Updating scheduled transaction %s", scheduled.id)
        self.db.update_scheduled(scheduled)

    def delete_scheduled(self, scheduled_id: str) -> None:
        """Delete a scheduled transaction."""
        logger.debug("Deleting scheduled transaction %s", scheduled_id)
        self.db.delete_scheduled(scheduled_id)

    def plan_due(
        self, scheduled_items: list[ScheduledTransaction], today: date
    ) -> ScheduledRun:
        """Compute the run for every occurrence due on or before ``today``.

        Occurrences after a schedule's end date are not generated. A
        ``once`` schedule is removed once due; any other schedule that generated
        something keeps its row with ``next_date`` moved to the first occurrence
        not generated.

        Raises:
            ValidationError: If a stored date cannot be parsed
        """
        transactions: list[Transaction] = []
        advanced: list[ScheduledTransaction] = []
        finished: list[str] = []
        expected: dict[str, str] = {}

        for scheduled in scheduled_items:
            current = parse_schedule_date(scheduled.next_date, scheduled.id, "nextDate")
            end: Optional[date] = None
            if scheduled.end_date:
                end = parse_schedule_date(scheduled.end_date, scheduled.id, "endDate")

            if current > today:
                continue

            occurrence = scheduled.next_date
            generated = 0
            while current <= today and (end is None or current <= end):
                transactions.extend(occurrence_transactions(scheduled, occurrence))
                generated += 1
                if scheduled.frequency == ONCE:
                    break
                current = next_occurrence(current, scheduled.frequency)
                occurrence = current.isoformat()

            if scheduled.frequency == ONCE:
                # Removed once due, even when its end date suppressed the occurrence
                expected[scheduled.id] = scheduled.next_date
                finished.append(scheduled.id)
            elif generated:
                expected[scheduled.id] = scheduled.next_date
                advanced.append(replace(scheduled, next_date=occurrence))

        return ScheduledRun(
            transactions=transactions,
            advanced=advanced,
            finished=finished,
            expected_next_dates=expected,
        )

    def process_due(self, today: Optional[date] = None) -> ScheduledRun:
        """Materialise every due scheduled transaction.

        Generated transactions, advanced ``next_date`` values and removed
        ``once`` schedules are written in one database transaction.

        Args:
            today: Reference date (defaults to the local current date)

        Returns:
            The applied ScheduledRun

        Raises:
            ValidationError: If a stored date cannot be parsed
            ConflictError: If a schedule changed while the run was computed
            DependencyError: If an account referenced by a schedule is gone
        """
        if today is None:
            today = date.today()

        run = self.plan_due(self.db.list_scheduled(), today)
        if run.expected_next_dates:
            logger.info(
                "Generating %d transaction(s) from %d scheduled transaction(s)",
                len(run.transactions),
                len(run.expected_next_dates),
            )
            self.db.apply_scheduled_run(run)
        return run
