"""
Stage transition engine
=======================

All writes to an opportunity's pipeline/stage go through these functions.
They validate that the target stage belongs to the target pipeline,
write inside a transaction, record a StageChange row, and return a
``Result``. On a database error the in-memory opportunity is restored to
its previous state and the error is returned instead of raised.
"""
import logging

from django.db import DatabaseError, transaction

from apps.core.results import Result
from .models import Opportunity, StageChange

logger = logging.getLogger(__name__)

# Marks an optional field the caller did not send (None clears the field)
UNSET = object()


def _stage_error(stage, pipeline):
    return f'Stage "{stage}" is not part of pipeline "{pipeline.name}".'


def move_stage(opportunity, new_stage, user=None):
    """
    Move an opportunity to another stage of its current pipeline.

    Any stage can be reached from any other in one move. Moving to the
    current stage is a successful no-op.
    """
    pipeline = opportunity.pipeline
    if not pipeline.has_stage(new_stage):
        return Result.failure(_stage_error(new_stage, pipeline), value=opportunity)

    old_stage = opportunity.stage
    if old_stage == new_stage:
        return Result.success(opportunity)

    opportunity.stage = new_stage
    try:
        with transaction.atomic():
            opportunity.save(update_fields=['stage', 'updated_at'])
            StageChange.objects.create(
                opportunity=opportunity,
                from_stage=old_stage,
                to_stage=new_stage,
                changed_by=user,
            )
    except DatabaseError as exc:
        opportunity.stage = old_stage
        logger.exception("Failed to move opportunity %s to %s", opportunity.pk, new_stage)
        return Result.failure(f'Could not move opportunity: {exc}', value=opportunity)

    logger.info("Opportunity %s moved %s → %s", opportunity.pk, old_stage, new_stage)
    return Result.success(opportunity)


def change_pipeline(opportunity, new_pipeline, stage=None, user=None):
    """
    Move an opportunity into another pipeline.

    The stage resets to the first stage of ``new_pipeline`` unless ``stage``
    is given, in which case it must belong to ``new_pipeline``.
    """
    if not new_pipeline.stages:
        return Result.failure(f'Pipeline "{new_pipeline.name}" has no stages.', value=opportunity)

    if new_pipeline.account_id != opportunity.pipeline.account_id:
        return Result.failure('Pipeline belongs to another sub-account.', value=opportunity)

    target_stage = stage or new_pipeline.first_stage()
    if not new_pipeline.has_stage(target_stage):
        return Result.failure(_stage_error(target_stage, new_pipeline), value=opportunity)

    old_pipeline = opportunity.pipeline
    old_stage = opportunity.stage

    opportunity.pipeline = new_pipeline
    opportunity.stage = target_stage
    try:
        with transaction.atomic():
            opportunity.save(update_fields=['pipeline', 'stage', 'updated_at'])
            StageChange.objects.create(
                opportunity=opportunity,
                from_stage=old_stage,
                to_stage=target_stage,
                changed_by=user,
            )
    except DatabaseError as exc:
        opportunity.pipeline = old_pipeline
        opportunity.stage = old_stage
        logger.exception("Failed to move opportunity %s to pipeline %s", opportunity.pk, new_pipeline.pk)
        return Result.failure(f'Could not change pipeline: {exc}', value=opportunity)

    logger.info(
        "Opportunity %s moved from pipeline %s to %s (%s)",
        opportunity.pk, old_pipeline.pk, new_pipeline.pk, target_stage,
    )
    return Result.success(opportunity)


def update_opportunity(opportunity, *, pipeline=None, stage=None, value=UNSET,
                       next_follow_up_date=UNSET, user=None):
    """
    Save the opportunity sidebar in one transaction.

    A pipeline change goes through ``change_pipeline`` (stage reset), a
    stage change within the same pipeline through ``move_stage``. Value and
    follow-up date are written afterwards; passing ``None`` clears them.
    If any write fails, nothing is stored, including the stage move and
    its history row.
    """
    old_pipeline = opportunity.pipeline
    old_stage = opportunity.stage
    previous = {
        'opportunity_value': opportunity.opportunity_value,
        'next_follow_up_date': opportunity.next_follow_up_date,
    }

    try:
        with transaction.atomic():
            if pipeline is not None and pipeline.pk != opportunity.pipeline_id:
                result = change_pipeline(opportunity, pipeline, stage=stage, user=user)
            elif stage is not None:
                result = move_stage(opportunity, stage, user=user)
            else:
                result = Result.success(opportunity)

            if not result.ok:
                return result

            fields = []
            if value is not UNSET:
                opportunity.opportunity_value = value
                fields.append('opportunity_value')
            if next_follow_up_date is not UNSET:
                opportunity.next_follow_up_date = next_follow_up_date
                fields.append('next_follow_up_date')

            if fields:
                opportunity.save(update_fields=fields + ['updated_at'])
    except DatabaseError as exc:
        opportunity.pipeline = old_pipeline
        opportunity.stage = old_stage
        for name, old in previous.items():
            setattr(opportunity, name, old)
        logger.exception("Failed to update opportunity %s", opportunity.pk)
        return Result.failure(f'Could not save opportunity: {exc}', value=opportunity)

    return Result.success(opportunity)


def delete_opportunity(opportunity):
    pk = opportunity.pk
    try:
        with transaction.atomic():
            opportunity.delete()
    except DatabaseError as exc:
        logger.exception("Failed to delete opportunity %s", pk)
        return Result.failure(f'Could not delete opportunity: {exc}')

    logger.info("Opportunity %s deleted", pk)
    return Result.success(pk)


def add_opportunity(contact, pipeline, stage=None, owner=None, value=None, next_follow_up_date=None):
    """Insert one opportunity (stage defaults to the pipeline's first stage)."""
    if not pipeline.stages:
        return Result.failure(f'Pipeline "{pipeline.name}" has no stages.')

    if contact.account_id != pipeline.account_id:
        return Result.failure('Contact and pipeline belong to different sub-accounts.')

    target_stage = stage or pipeline.first_stage()
    if not pipeline.has_stage(target_stage):
        return Result.failure(_stage_error(target_stage, pipeline))

    try:
        opportunity = Opportunity.objects.create(
            contact=contact,
            pipeline=pipeline,
            stage=target_stage,
            owner=owner,
            opportunity_value=value,
            next_follow_up_date=next_follow_up_date,
        )
    except DatabaseError as exc:
        logger.exception("Failed to add contact %s to pipeline %s", contact.pk, pipeline.pk)
        return Result.failure(f'Could not add opportunity: {exc}')

    logger.info("Contact %s added to pipeline %s at %s", contact.pk, pipeline.pk, target_stage)
    return Result.success(opportunity)


def bulk_assign(contact_ids, pipeline, stage=None, owner=None):
    """
    Put every given contact into ``pipeline`` at ``stage``.

    Inside one transaction, every existing opportunity of those contacts
    (in any pipeline) is deleted first, then one fresh opportunity per
    contact is inserted, so each contact ends with exactly one opportunity.
    """
    from apps.contacts.models import Contact

    if not pipeline.stages:
        return Result.failure(f'Pipeline "{pipeline.name}" has no stages.')

    target_stage = stage or pipeline.first_stage()
    if not pipeline.has_stage(target_stage):
        return Result.failure(_stage_error(target_stage, pipeline))

    contacts = list(Contact.objects.filter(pk__in=contact_ids, account=pipeline.account))
    if not contacts:
        return Result.failure('No contacts selected.')

    try:
        with transaction.atomic():
            deleted, _details = Opportunity.objects.filter(contact__in=contacts).delete()
            created = Opportunity.objects.bulk_create([
                Opportunity(contact=contact, pipeline=pipeline, stage=target_stage, owner=owner)
                for contact in contacts
            ])
    except DatabaseError as exc:
        logger.exception("Bulk assign to pipeline %s failed", pipeline.pk)
        return Result.failure(f'Could not add contacts to pipeline: {exc}')

    logger.info(
        "Bulk assigned %s contacts to pipeline %s at %s (%s rows replaced)",
        len(created), pipeline.pk, target_stage, deleted,
    )
    return Result.success(created)
