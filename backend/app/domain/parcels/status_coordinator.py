"""
Status Transition Coordinator (Domain Logic).

Orchestrates parcel state changes across the parcel store, the tracking
ledger, the payment ledger and the notification/audit sink.

Every operation runs in the caller's session and ends with exactly one
commit, so a parcel write never lands without its ledger entry. Nothing is
locked between the read and the write: concurrent status changes to the same
parcel resolve as last-writer-wins. Payment confirmation is the exception; its
guard is a conditional update inside the store.
"""

import logging
from typing import Optional

from backend.app.core.config import settings
from backend.app.core.exceptions import (
    ConflictError,
    InvalidStatusTransitionError,
    PolicyViolationError,
    ResourceNotFoundError,
)
from backend.app.core.guards import OwnershipGuard
from backend.app.domain.parcels import cancellation_policy
from backend.app.domain.parcels.context import ParcelContext
from backend.app.domain.parcels.payments import PaymentConfirmed
from backend.app.domain.parcels.status_transitions import is_allowed_transition
from backend.app.models.notification import NotificationType
from backend.app.models.parcel import Parcel
from backend.app.models.parcel_enums import ParcelStatus
from backend.app.models.tracking_event import TrackingEvent
from backend.app.schemas.parcel import CreatedBy, ParcelCreate, PaymentConfirmation
from backend.app.schemas.tracking import TrackingEventCreate
from backend.app.services.audit import AuditAction, log_event
from backend.app.services.notification_service import NotificationService
from backend.app.services.parcel_store import ParcelStore
from backend.app.services.tracking_ledger import SYSTEM_ACTOR, TrackingLedger

logger = logging.getLogger(__name__)
ownership_guard = OwnershipGuard()

CREATED_MESSAGE = "Parcel created and awaiting pickup"


class StatusTransitionCoordinator:

    @staticmethod
    async def create_parcel(ctx: ParcelContext, draft: ParcelCreate) -> Parcel:
        """
        Book a parcel and open its tracking history.

        The creator defaults to the caller when the draft does not name one.
        """
        if draft.created_by is None or not draft.created_by.email:
            draft = draft.model_copy(
                update={"created_by": CreatedBy(name=ctx.actor_name, email=ctx.actor_email)}
            )

        now = ctx.now()
        parcel = await ParcelStore.create(ctx.db, draft, now=now)

        await TrackingLedger.append(
            ctx.db,
            tracking_code=parcel.tracking_code,
            parcel_id=parcel.id,
            status=ParcelStatus.PENDING,
            message=CREATED_MESSAGE,
            actor=SYSTEM_ACTOR,
            now=now,
        )
        await log_event(
            ctx.db,
            action=AuditAction.PARCEL_CREATED,
            actor_email=ctx.actor_email,
            actor_name=ctx.actor_name,
            parcel_id=parcel.id,
            tracking_code=parcel.tracking_code,
            metadata={"fare": parcel.fare, "parcel_type": parcel.parcel_type},
            now=now,
        )

        await ctx.db.commit()
        logger.info("Parcel %s created by %s", parcel.tracking_code, ctx.actor_email)
        return parcel

    @staticmethod
    async def cancel(ctx: ParcelContext, parcel_id: int) -> Parcel:
        """
        Self-service cancellation.

        Raises:
            ResourceNotFoundError: parcel absent
            InsufficientPermissionsError: caller is neither creator nor admin
            ConflictError: parcel already cancelled
            PolicyViolationError: parcel delivered, or the cancellation policy
                denies it (no writes happen)
        """
        parcel = await ParcelStore.find_by_id(ctx.db, parcel_id)
        ownership_guard.enforce(parcel.created_by_email, ctx.actor, "parcel")

        if parcel.status == ParcelStatus.CANCELLED:
            raise ConflictError("Parcel is already cancelled", details={"id": parcel.id})
        if parcel.status == ParcelStatus.DELIVERED:
            raise PolicyViolationError("Delivered parcels cannot be cancelled.", details={"id": parcel.id})

        now = ctx.now()
        decision = cancellation_policy.evaluate(parcel, now)
        if not decision.allowed:
            logger.info("Cancellation of %s denied: %s", parcel.tracking_code, decision.reason)
            raise PolicyViolationError(decision.reason, details={"id": parcel.id})

        previous_status = parcel.status
        parcel = await ParcelStore.update_status(
            ctx.db, parcel.id, ParcelStatus.CANCELLED, ctx.actor_label, now=now
        )
        await TrackingLedger.append(
            ctx.db,
            tracking_code=parcel.tracking_code,
            parcel_id=parcel.id,
            status=ParcelStatus.CANCELLED,
            message=f"Parcel cancelled by {ctx.actor_label}",
            actor=ctx.actor_label,
            now=now,
        )
        await NotificationService.create_notification(
            ctx.db,
            recipient_email=parcel.created_by_email,
            title="Parcel cancelled",
            message=f"Your parcel {parcel.tracking_code} has been cancelled.",
            type=NotificationType.PARCEL_UPDATE,
            metadata={"parcel_id": parcel.id, "tracking_code": parcel.tracking_code},
            now=now,
        )
        await log_event(
            ctx.db,
            action=AuditAction.PARCEL_CANCELLED,
            actor_email=ctx.actor_email,
            actor_name=ctx.actor_name,
            parcel_id=parcel.id,
            tracking_code=parcel.tracking_code,
            metadata={"previous_status": previous_status.value},
            now=now,
        )

        await ctx.db.commit()
        return parcel

    @staticmethod
    async def advance_status(
        ctx: ParcelContext,
        parcel_id: int,
        new_status: ParcelStatus,
        message: Optional[str] = None
    ) -> Parcel:
        """
        Privileged status override. The cancellation policy is not consulted.

        Any status may follow any other unless
        ``settings.enforce_status_transitions`` is on.
        """
        parcel = await ParcelStore.find_by_id(ctx.db, parcel_id)
        previous_status = parcel.status

        if settings.enforce_status_transitions and not is_allowed_transition(previous_status, new_status):
            raise InvalidStatusTransitionError(previous_status.value, new_status.value)

        now = ctx.now()
        parcel = await ParcelStore.update_status(ctx.db, parcel.id, new_status, ctx.actor_label, now=now)
        await TrackingLedger.append(
            ctx.db,
            tracking_code=parcel.tracking_code,
            parcel_id=parcel.id,
            status=new_status,
            message=message or f"Status updated to {new_status.value}",
            actor=ctx.actor_label,
            now=now,
        )
        await NotificationService.create_notification(
            ctx.db,
            recipient_email=parcel.created_by_email,
            title="Parcel status updated",
            message=f"Your parcel {parcel.tracking_code} is now {new_status.value}.",
            type=NotificationType.PARCEL_UPDATE,
            metadata={"parcel_id": parcel.id, "status": new_status.value},
            now=now,
        )
        await log_event(
            ctx.db,
            action=AuditAction.PARCEL_STATUS_UPDATED,
            actor_email=ctx.actor_email,
            actor_name=ctx.actor_name,
            parcel_id=parcel.id,
            tracking_code=parcel.tracking_code,
            metadata={"from": previous_status.value, "to": new_status.value},
            now=now,
        )

        await ctx.db.commit()
        return parcel

    @staticmethod
    async def confirm_payment(
        ctx: ParcelContext,
        tracking_code: str,
        confirmation: PaymentConfirmation
    ) -> Parcel:
        """
        Mark a parcel as paid and copy the payment into the payment ledger.

        Raises:
            ResourceNotFoundError: parcel absent
            AlreadyPaidError: parcel already paid; nothing is written
        """
        event = PaymentConfirmed(
            tracking_code=tracking_code,
            amount=confirmation.amount,
            paid_at=ctx.now(),
            payment_intent_id=confirmation.payment_intent_id,
            payer_email=str(confirmation.payer_email) if confirmation.payer_email else ctx.actor_email,
        )

        parcel = await ParcelStore.record_payment(
            ctx.db, tracking_code, event.as_parcel_payment_info(), now=event.paid_at
        )
        ctx.db.add(event.to_payment_record(parcel.id))

        await NotificationService.create_notification(
            ctx.db,
            recipient_email=parcel.created_by_email,
            title="Payment received",
            message=f"Payment of {event.amount:.2f} received for parcel {tracking_code}.",
            type=NotificationType.PAYMENT_UPDATE,
            metadata={"parcel_id": parcel.id, "payment_intent_id": event.payment_intent_id},
            now=event.paid_at,
        )
        await log_event(
            ctx.db,
            action=AuditAction.PARCEL_PAYMENT_CONFIRMED,
            actor_email=ctx.actor_email,
            actor_name=ctx.actor_name,
            parcel_id=parcel.id,
            tracking_code=tracking_code,
            metadata={"amount": event.amount, "payment_intent_id": event.payment_intent_id},
            now=event.paid_at,
        )

        await ctx.db.commit()
        logger.info("Payment confirmed for parcel %s", tracking_code)
        return parcel

    @staticmethod
    async def delete_parcel(ctx: ParcelContext, parcel_id: int) -> Parcel:
        """
        Delete a Delivered or Cancelled parcel.

        Tracking events are kept; the ledger outlives the parcel record.
        """
        parcel = await ParcelStore.find_by_id(ctx.db, parcel_id)
        ownership_guard.enforce(parcel.created_by_email, ctx.actor, "parcel")

        parcel = await ParcelStore.delete(ctx.db, parcel.id)
        await log_event(
            ctx.db,
            action=AuditAction.PARCEL_DELETED,
            actor_email=ctx.actor_email,
            actor_name=ctx.actor_name,
            parcel_id=parcel.id,
            tracking_code=parcel.tracking_code,
            metadata={"status": parcel.status.value},
            now=ctx.now(),
        )

        await ctx.db.commit()
        return parcel

    @staticmethod
    async def record_tracking_event(ctx: ParcelContext, payload: TrackingEventCreate) -> TrackingEvent:
        """
        Append a tracking event posted by a rider or admin.

        When the event references an existing parcel, the parcel's status is
        synced to the event status. Unknown parcel ids are still logged.
        """
        now = ctx.now()
        actor = payload.updated_by or ctx.actor_label

        event = await TrackingLedger.append(
            ctx.db,
            tracking_code=payload.tracking_code,
            parcel_id=payload.parcel_id,
            status=payload.status,
            message=payload.message,
            actor=actor,
            now=now,
        )

        if payload.parcel_id is not None:
            try:
                await ParcelStore.update_status(ctx.db, payload.parcel_id, payload.status, actor, now=now)
            except ResourceNotFoundError:
                logger.warning(
                    "Tracking event %s references unknown parcel %s", event.id, payload.parcel_id
                )

        await log_event(
            ctx.db,
            action=AuditAction.TRACKING_EVENT_RECORDED,
            actor_email=ctx.actor_email,
            actor_name=ctx.actor_name,
            parcel_id=payload.parcel_id,
            tracking_code=payload.tracking_code,
            metadata={"event_id": event.id, "status": payload.status.value},
            now=now,
        )

        await ctx.db.commit()
        return event
