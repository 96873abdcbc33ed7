from django.contrib import admin

from availability.models import ActivityLogEntry, BoardPointer, MemberStatus


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(MemberStatus)
class MemberStatusAdmin(ReadOnlyAdmin):
    list_display = ("member_id", "state", "metadata", "updated_at")
    list_filter = ("state",)
    search_fields = ("member_id",)


@admin.register(ActivityLogEntry)
class ActivityLogEntryAdmin(ReadOnlyAdmin):
    list_display = ("member_id", "action", "timestamp")
    list_filter = ("action",)
    search_fields = ("member_id",)
    date_hierarchy = "timestamp"


@admin.register(BoardPointer)
class BoardPointerAdmin(ReadOnlyAdmin):
    list_display = ("channel_id", "message_id", "created_at")
