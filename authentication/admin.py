from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from authentication.models import Seller


@admin.register(Seller)
class SellerAdmin(UserAdmin):
    list_display = ("email", "username", "first_name", "last_name", "is_active", "is_staff", "date_joined")
    list_filter = ("is_active", "is_staff", "is_superuser")
    search_fields = ("email", "username", "first_name", "last_name")
    ordering = ("-date_joined",)
