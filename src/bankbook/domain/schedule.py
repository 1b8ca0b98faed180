"""Scheduled transaction domain service."""

from datetime import date
from typing import Any, Optional

from bankbook.database.constants import EntityType
from bankbook.database.mappers import schedule_to_domain
from bankbook.database.models import RecurringTransaction, ScheduledTransaction, TemplateSelector
from bankbook.database.store import UNSET, LedgerStore, generate_unique_id, is_set
from bankbook.domain.entities import ScheduledTransaction as ScheduleEntity
from bankbook.domain.errors import ValidationError
from bankbook.utils import date_codec

_IS_SCHEDULE = TemplateSelector.entity == int(EntityType.SCHEDULED_TEMPLATE_SELECTOR)

DEFAULT_REMINDER_DAYS = 7


class ScheduleService:
    """Service for scheduled (recurring) transactions.

    Each schedule is a selector row that owns one recurring transaction row.
    The two are created and deleted together.
    """

    def __init__(self, store: LedgerStore):
        """Initialize schedule service.

        Args:
            store: Open ledger store
        """
        self.store = store

    def create_schedule(
        self,
        template_id: int,
        start_date: str | date,
        account_id: Optional[str] = None,
        repeat_interval: int = 1,
        repeat_multiplier: int = 1,
        reminder_days: int = DEFAULT_REMINDER_DAYS,
    ) -> int:
        """Create a schedule for a template.

        The next occurrence starts out equal to the start date.

        Args:
            template_id: Template applied on each occurrence
            start_date: First occurrence (ISO calendar date)
            account_id: Optional account unique id
            repeat_interval: Recurrence unit code
            repeat_multiplier: Number of units between occurrences
            reminder_days: Days of advance reminder

        Returns:
            Schedule ID

        Raises:
            ValidationError: If the start date is invalid or the multiplier is not positive
            IntegrityViolation: If the template does not exist
        """
        epoch = date_codec.to_epoch(start_date)
        if repeat_multiplier < 1:
            raise ValidationError("Repeat multiplier must be at least 1")

        now = date_codec.now()
        with self.store.atomic():
            recurring_id = self.store.insert(
                RecurringTransaction(
                    attributes=1,
                    priority=0,
                    remind_days_in_advance=reminder_days,
                    creation_time=now,
                    first_unprocessed_event_date=epoch,
                    modification_date=now,
                    unique_id=generate_unique_id(),
                    opt=0,
                )
            )
            schedule_id = self.store.insert(
                ScheduledTransaction(
                    template_id=template_id,
                    recurring_transaction_id=recurring_id,
                    start_date=epoch,
                    next_date=epoch,
                    repeat_interval=repeat_interval,
                    repeat_multiplier=repeat_multiplier,
                    account_unique_id=account_id,
                    remind_days_in_advance=reminder_days,
                    creation_time=now,
                    modification_date=now,
                    unique_id=generate_unique_id(),
                    opt=0,
                )
            )
        return schedule_id

    def get_schedule(self, schedule_id: int) -> Optional[ScheduleEntity]:
        schedule = (
            self.store.session.query(ScheduledTransaction)
            .filter(ScheduledTransaction.id == schedule_id)
            .first()
        )
        return schedule_to_domain(schedule) if schedule else None

    def list_schedules(self) -> list[ScheduleEntity]:
        """List schedules ordered by start date."""
        schedules = (
            self.store.session.query(ScheduledTransaction)
            .order_by(ScheduledTransaction.start_date, ScheduledTransaction.id)
            .all()
        )
        return [schedule_to_domain(schedule) for schedule in schedules]

    def update_schedule(
        self,
        schedule_id: int,
        start_date: Any = UNSET,
        next_date: Any = UNSET,
        repeat_interval: Any = UNSET,
        repeat_multiplier: Any = UNSET,
        account_id: Any = UNSET,
        reminder_days: Any = UNSET,
    ) -> bool:
        """Update provided schedule fields; returns False if not found or nothing to update."""
        if is_set(repeat_multiplier) and repeat_multiplier < 1:
            raise ValidationError("Repeat multiplier must be at least 1")
        start_epoch = date_codec.to_epoch(start_date) if is_set(start_date) else UNSET
        next_epoch = date_codec.to_epoch(next_date) if is_set(next_date) else UNSET

        changed = self.store.update_fields(
            TemplateSelector,
            schedule_id,
            {
                "start_date": start_epoch,
                "next_date": next_epoch,
                "repeat_interval": repeat_interval,
                "repeat_multiplier": repeat_multiplier,
                "account_id": account_id,
                "reminder_days": reminder_days,
            },
            {"account_id": "account_unique_id", "reminder_days": "remind_days_in_advance"},
            criteria=(_IS_SCHEDULE,),
        )
        return changed > 0

    def delete_schedule(self, schedule_id: int) -> bool:
        """Delete a schedule and the recurring transaction row it owns.

        A schedule whose recurring transaction is already gone is still deleted.

        Returns:
            True if the schedule existed
        """
        with self.store.atomic() as session:
            schedule = (
                session.query(ScheduledTransaction.recurring_transaction_id)
                .filter(ScheduledTransaction.id == schedule_id, _IS_SCHEDULE)
                .first()
            )
            if schedule is None:
                return False

            self.store.delete_rows(TemplateSelector, TemplateSelector.id == schedule_id, _IS_SCHEDULE)
            if schedule.recurring_transaction_id is not None:
                self.store.delete_rows(
                    RecurringTransaction, RecurringTransaction.id == schedule.recurring_transaction_id
                )
        return True
