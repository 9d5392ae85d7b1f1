# matching/admin.py

from django.contrib import admin, messages
from .models import Block, Conversation, Interest, Match, Message, Pass, Profile, Report


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'display_name', 'profile_visible', 'created_at')
    search_fields = ('display_name', 'user__username')


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ('id', 'user1', 'user2', 'origin', 'is_active', 'created_at')
    list_filter = ('is_active', 'origin')


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'reporter', 'target_kind', 'target_user', 'status', 'created_at')
    list_filter = ('status', 'target_kind')
    readonly_fields = ('reporter', 'target_kind', 'target_user', 'target_message', 'reason', 'details', 'status')
    actions = ['mark_reviewed', 'mark_closed']

    def _advance(self, request, queryset, status):
        for report in queryset:
            try:
                report.advance(status)
            except ValueError as exc:
                self.message_user(request, str(exc), level=messages.WARNING)

    @admin.action(description='Mark selected reports as reviewed')
    def mark_reviewed(self, request, queryset):
        self._advance(request, queryset, Report.Status.REVIEWED)

    @admin.action(description='Mark selected reports as closed')
    def mark_closed(self, request, queryset):
        self._advance(request, queryset, Report.Status.CLOSED)


admin.site.register(Interest)
admin.site.register(Block)
admin.site.register(Pass)
admin.site.register(Conversation)
admin.site.register(Message)
