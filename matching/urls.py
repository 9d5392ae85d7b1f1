from django.urls import path
from .views import (
    UserProfileView,
    PreferencesView,
    ProfileDetailView,
    CandidateFeedView,
    InterestView,
    WithdrawInterestView,
    PassView,
    MatchListView,
    UnmatchView,
    ConversationListView,
    ConversationDetailView,
    MessageListView,
    MarkReadView,
    BlockView,
    UnblockView,
    ReportView,
    SupportResourcesView,
    SafetyGuidelinesView,
)

urlpatterns = [
    path('profiles/me/', UserProfileView.as_view(), name='profile-me'),
    path('profiles/me/preferences/', PreferencesView.as_view(), name='profile-preferences'),
    path('profiles/<int:user_id>/', ProfileDetailView.as_view(), name='profile-detail'),
    path('feed/', CandidateFeedView.as_view(), name='candidate-feed'),
    path('interests/', InterestView.as_view(), name='interest-create'),
    path('interests/<int:target_id>/', WithdrawInterestView.as_view(), name='interest-withdraw'),
    path('passes/', PassView.as_view(), name='pass-create'),
    path('matches/', MatchListView.as_view(), name='match-list'),
    path('matches/<int:match_id>/unmatch/', UnmatchView.as_view(), name='match-unmatch'),
    path('conversations/', ConversationListView.as_view(), name='conversation-list'),
    path('conversations/<int:match_id>/', ConversationDetailView.as_view(), name='conversation-detail'),
    path('conversations/<int:match_id>/messages/', MessageListView.as_view(), name='conversation-messages'),
    path('conversations/<int:match_id>/read/', MarkReadView.as_view(), name='conversation-read'),
    path('safety/blocks/', BlockView.as_view(), name='block-create'),
    path('safety/blocks/<int:user_id>/', UnblockView.as_view(), name='block-delete'),
    path('safety/reports/', ReportView.as_view(), name='report-list'),
    path('safety/resources/', SupportResourcesView.as_view(), name='safety-resources'),
    path('safety/guidelines/', SafetyGuidelinesView.as_view(), name='safety-guidelines'),
]
