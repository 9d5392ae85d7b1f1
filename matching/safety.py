import logging

from django.contrib.auth.models import User
from django.db.models import Q

from .exceptions import ValidationError
from .models import Block, Message, Report
from .resources import SAFETY_GUIDELINES, SUPPORT_RESOURCES

logger = logging.getLogger(__name__)


class SafetyGate:
    """
    Blocking and reporting. Nothing here rewrites matches or conversations:
    the feed and the conversation service ask the gate at read/write time.
    """

    def block(self, blocker_id, blocked_id, reason=''):
        if blocker_id == blocked_id:
            raise ValidationError('You cannot block yourself.')
        if not User.objects.filter(pk=blocked_id).exists():
            raise ValidationError(f'User {blocked_id} does not exist.')
        block, created = Block.objects.get_or_create(
            blocker_id=blocker_id,
            blocked_id=blocked_id,
            defaults={'reason': (reason or '')[:255]},
        )
        if created:
            logger.info('User %s blocked user %s', blocker_id, blocked_id)
        return block

    def unblock(self, blocker_id, blocked_id):
        deleted, _ = Block.objects.filter(blocker_id=blocker_id, blocked_id=blocked_id).delete()
        if deleted:
            logger.info('User %s unblocked user %s', blocker_id, blocked_id)
        return bool(deleted)

    def is_blocked(self, blocker_id, blocked_id):
        return Block.objects.filter(blocker_id=blocker_id, blocked_id=blocked_id).exists()

    def is_blocked_between(self, user_a, user_b):
        return Block.objects.filter(
            Q(blocker_id=user_a, blocked_id=user_b) | Q(blocker_id=user_b, blocked_id=user_a)
        ).exists()

    def blocked_user_ids(self, user_id):
        """Everyone on either side of a block with user_id."""
        pairs = Block.objects.filter(
            Q(blocker_id=user_id) | Q(blocked_id=user_id)
        ).values_list('blocker_id', 'blocked_id')
        ids = set()
        for blocker, blocked in pairs:
            ids.add(blocked if blocker == user_id else blocker)
        return ids

    def report(self, reporter_id, target_kind, reason, target_user_id=None, message_id=None, details=''):
        reason = (reason or '').strip()
        if not reason:
            raise ValidationError('A reason is required.')
        if target_kind not in Report.TargetKind.values:
            raise ValidationError(f'Unknown report target: {target_kind!r}.')

        message = None
        if target_kind == Report.TargetKind.MESSAGE:
            if message_id is None:
                raise ValidationError('message_id is required for message reports.')
            message = (
                Message.objects.select_related('conversation__match')
                .filter(pk=message_id).first()
            )
            if message is None or not message.conversation.match.has_participant(reporter_id):
                raise ValidationError(f'Message {message_id} cannot be reported.')
            target_user_id = message.sender_id
        else:
            if target_user_id is None:
                raise ValidationError('target_user_id is required.')
            if not User.objects.filter(pk=target_user_id).exists():
                raise ValidationError(f'User {target_user_id} does not exist.')

        if target_user_id == reporter_id:
            raise ValidationError('You cannot report yourself.')

        report = Report.objects.create(
            reporter_id=reporter_id,
            target_kind=target_kind,
            target_user_id=target_user_id,
            target_message=message,
            reason=reason[:255],
            details=details or '',
        )
        logger.info(
            'Report %s filed by user %s against %s %s',
            report.pk, reporter_id, target_kind, message_id or target_user_id
        )
        return report

    def list_reports(self, reporter_id):
        return list(Report.objects.filter(reporter_id=reporter_id).order_by('-created_at', '-id'))

    def support_resources(self, category=None):
        if category:
            return [r for r in SUPPORT_RESOURCES if r['category'] == category]
        return list(SUPPORT_RESOURCES)

    def safety_guidelines(self):
        return list(SAFETY_GUIDELINES)


gate = SafetyGate()
