from django.shortcuts import get_object_or_404

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated

from .conversations import conversations
from .exceptions import NotFoundError, ValidationError
from .feed import Preferences, feed
from .ledger import ledger
from .models import Profile
from .registry import registry
from .safety import gate
from .serializers import (
    BlockInputSerializer,
    ConversationSerializer,
    InterestInputSerializer,
    MatchSerializer,
    MessageInputSerializer,
    MessageSerializer,
    PreferencesSerializer,
    ProfileSerializer,
    ReportInputSerializer,
    ReportSerializer,
    TargetSerializer,
)


def _int_param(request, name, default=None):
    value = request.query_params.get(name)
    if value in (None, ''):
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f'{name} must be an integer.')


"""
PROFILE VIEWS
"""

class UserProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):
        profile = get_object_or_404(Profile, pk=request.user.id)
        return Response(ProfileSerializer(profile).data)

    def put(self, request, format=None):
        if Profile.objects.filter(pk=request.user.id).exists():
            return self.patch(request, format)
        serializer = ProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(user=request.user)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def patch(self, request, format=None):
        profile = get_object_or_404(Profile, pk=request.user.id)
        serializer = ProfileSerializer(profile, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=400)


class PreferencesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):
        profile = get_object_or_404(Profile, pk=request.user.id)
        return Response(PreferencesSerializer(Preferences.from_profile(profile)).data)

    def put(self, request, format=None):
        serializer = PreferencesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feed.save_preferences(request.user.id, serializer.validated_data)
        return Response(PreferencesSerializer(serializer.validated_data).data)


class ProfileDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, user_id, format=None):
        profile = get_object_or_404(Profile, pk=user_id)
        if user_id != request.user.id:
            if gate.is_blocked_between(request.user.id, user_id) or not profile.profile_visible:
                raise NotFoundError(f'Profile {user_id} not found.')
        return Response(profile.project())


"""
MATCHING VIEWS
"""

class CandidateFeedView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):
        page = feed.next_page(
            request.user.id,
            cursor=request.query_params.get('cursor') or None,
            page_size=_int_param(request, 'page_size'),
        )
        return Response({'results': page.results, 'next_cursor': page.next_cursor})


class InterestView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = InterestInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = ledger.record_interest(
            request.user.id,
            serializer.validated_data['target_id'],
            serializer.validated_data['kind'],
        )
        if result.matched:
            return Response({'status': 'match', 'match_id': result.match.pk}, status=201)
        if result.match is not None:
            return Response({'status': 'matched', 'match_id': result.match.pk}, status=200)
        return Response({'status': 'pending'}, status=200)


class WithdrawInterestView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, target_id, format=None):
        ledger.withdraw_interest(request.user.id, target_id)
        return Response(status=204)


class PassView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = TargetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feed.record_pass(request.user.id, serializer.validated_data['target_id'])
        return Response({'status': 'passed'}, status=200)


class MatchListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):
        include_inactive = request.query_params.get('include_inactive') in ('1', 'true', 'True')
        matches = registry.list_matches(request.user.id, include_inactive=include_inactive)
        serializer = MatchSerializer(matches, many=True, context={'user_id': request.user.id})
        return Response(serializer.data)


class UnmatchView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, match_id, format=None):
        match = registry.get_match(match_id)
        if not match.has_participant(request.user.id):
            raise NotFoundError(f'Match {match_id} not found.')
        registry.unmatch(request.user.id, match.other_user_id(request.user.id))
        return Response({'status': 'unmatched'}, status=200)


"""
CONVERSATION VIEWS
"""

class ConversationListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):
        items = conversations.list_conversations(request.user.id)
        serializer = ConversationSerializer(items, many=True, context={'user_id': request.user.id})
        return Response(serializer.data)


class ConversationDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, match_id, format=None):
        conversations.delete_conversation(match_id, request.user.id)
        return Response(status=204)


class MessageListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, match_id, format=None):
        messages = conversations.list_messages(
            match_id,
            request.user.id,
            limit=_int_param(request, 'limit'),
            before=_int_param(request, 'before'),
        )
        return Response(MessageSerializer(messages, many=True).data)

    def post(self, request, match_id, format=None):
        serializer = MessageInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = conversations.append_message(match_id, request.user.id, serializer.validated_data['content'])
        return Response(MessageSerializer(message).data, status=201)


class MarkReadView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, match_id, format=None):
        marked = conversations.mark_read(match_id, request.user.id)
        return Response({'marked': marked}, status=200)


"""
SAFETY VIEWS
"""

class BlockView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = BlockInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        gate.block(request.user.id, serializer.validated_data['user_id'], serializer.validated_data['reason'])
        return Response({'status': 'blocked'}, status=201)


class UnblockView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, user_id, format=None):
        gate.unblock(request.user.id, user_id)
        return Response(status=204)


class ReportView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):
        return Response(ReportSerializer(gate.list_reports(request.user.id), many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = ReportInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = gate.report(request.user.id, **serializer.validated_data)
        return Response(ReportSerializer(report).data, status=201)


class SupportResourcesView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, format=None):
        category = request.query_params.get('category') or None
        return Response({'resources': gate.support_resources(category)})


class SafetyGuidelinesView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, format=None):
        return Response({'guidelines': gate.safety_guidelines()})
