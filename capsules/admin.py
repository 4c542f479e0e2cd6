from django.contrib import admin
from .models import Capsule, MemoryEntry


class MemoryEntryInline(admin.TabularInline):
    model = MemoryEntry
    extra = 0
    fields = ("member_name", "lock_date", "notified", "created_at")
    readonly_fields = ("notified", "created_at")


@admin.register(Capsule)
class CapsuleAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "type", "created_by", "lock_date", "notified", "created_at")
    list_filter = ("type", "notified", "is_deleted")
    search_fields = ("title", "created_by__email")
    readonly_fields = ("notified", "member_details")
    filter_horizontal = ("members",)
    inlines = [MemoryEntryInline]


@admin.register(MemoryEntry)
class MemoryEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "capsule", "member_name", "lock_date", "notified", "created_at")
    list_filter = ("notified",)
    search_fields = ("member_name", "capsule__title")
    readonly_fields = ("notified",)
