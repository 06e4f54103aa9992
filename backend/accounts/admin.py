import csv

from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth.forms import UserCreationForm, UserChangeForm
from django.http import HttpResponse

from .models import CustomUser


class CustomUserCreationForm(UserCreationForm):
    class Meta:
        model = CustomUser
        fields = ('email', 'name', 'role')


class CustomUserChangeForm(UserChangeForm):
    class Meta:
        model = CustomUser
        fields = '__all__'


class ProfileCompleteFilter(admin.SimpleListFilter):
    title = 'Profile'
    parameter_name = 'profile'

    def lookups(self, request, model_admin):
        return (('complete', 'Complete'), ('incomplete', 'Incomplete'))

    def queryset(self, request, queryset):
        if self.value() == 'complete':
            return queryset.filter(is_profile_complete=True)
        if self.value() == 'incomplete':
            return queryset.filter(is_profile_complete=False)
        return queryset


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    add_form = CustomUserCreationForm
    form = CustomUserChangeForm
    list_display = (
        'email', 'name', 'role', 'phone_number', 'city', 'state', 'pincode',
        'is_profile_complete', 'is_staff', 'is_active', 'date_joined',
    )
    list_filter = ('role', ProfileCompleteFilter, 'is_staff', 'is_active', 'state')
    fieldsets = (
        (None, {'fields': ('email', 'password', 'role')}),
        ('Profile', {'fields': ('name', 'phone_number', 'city', 'state', 'pincode', 'google_id', 'is_profile_complete')}),
        ('Permissions', {'fields': ('is_staff', 'is_active', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {'classes': ('wide',), 'fields': (
            'email', 'name', 'role', 'password1', 'password2', 'is_staff', 'is_active',
        )}),
    )
    search_fields = ('email', 'name', 'phone_number', 'pincode')
    ordering = ('-date_joined',)
    readonly_fields = ('is_profile_complete',)
    actions = ['export_as_csv']

    def export_as_csv(self, request, queryset):
        resp = HttpResponse(content_type='text/csv')
        resp['Content-Disposition'] = 'attachment; filename=portal_users.csv'
        writer = csv.writer(resp)
        writer.writerow(['id', 'email', 'name', 'role', 'phone_number', 'city', 'state', 'pincode', 'profile_complete', 'date_joined'])
        for u in queryset:
            writer.writerow([
                u.id, u.email, u.name, u.role, u.phone_number,
                u.city, u.state, u.pincode, u.is_profile_complete, u.date_joined,
            ])
        return resp
    export_as_csv.short_description = "Export selected to CSV"
