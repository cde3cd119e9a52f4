from django.contrib import admin
from django.db.models import Count

from .models import Family, FamilyMember


# ──────────────────────────────────────────
# MEMBER INLINE (for Family)
# ──────────────────────────────────────────
class FamilyMemberInline(admin.TabularInline):
    model            = FamilyMember
    extra            = 0
    fields           = ("name", "relation", "date_of_birth", "marital_status", "married_to_other_samaj", "mobile_number")
    show_change_link = True


# ──────────────────────────────────────────
# FAMILY ADMIN
# ──────────────────────────────────────────
@admin.register(Family)
class FamilyAdmin(admin.ModelAdmin):
    list_display  = ("family_code", "get_primary_member", "native_place", "gotra", "get_member_count")
    list_filter   = ("native_place", "gotra")
    search_fields = ("family_code", "address", "native_place", "gotra", "members__name")
    ordering      = ("id",)
    inlines       = [FamilyMemberInline]

    fieldsets = (
        ("Family Information", {
            "fields": ("family_code", "native_place", "gotra")
        }),
        ("Address", {
            "fields": ("address",)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(member_count=Count("members"))

    def get_primary_member(self, obj):
        primary = obj.primary_member
        return primary.name if primary else "N/A"
    get_primary_member.short_description = "Main Member"

    def get_member_count(self, obj):
        return obj.member_count
    get_member_count.short_description = "Total Members"
    get_member_count.admin_order_field = "member_count"


# ──────────────────────────────────────────
# FAMILY MEMBER ADMIN
# ──────────────────────────────────────────
@admin.register(FamilyMember)
class FamilyMemberAdmin(admin.ModelAdmin):
    list_display  = ("name", "family", "relation", "date_of_birth", "marital_status", "married_to_other_samaj")
    list_filter   = ("relation", "marital_status", "married_to_other_samaj")
    search_fields = ("name", "email", "mobile_number", "job_role", "family__family_code")
    ordering      = ("family", "id")

    fieldsets = (
        ("Identity", {
            "fields": ("family", "name", "relation", "date_of_birth")
        }),
        ("Marriage", {
            "fields": ("marital_status", "married_to_other_samaj"),
        }),
        ("Contact", {
            "fields": ("education", "mobile_number", "email"),
        }),
        ("Work", {
            "fields": ("job_role", "job_address"),
            "classes": ("collapse",),
        }),
    )
