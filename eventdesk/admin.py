from django.contrib import admin

from eventdesk.models import Event, Profile, Registration, Task, VolunteerAssignment

# Registration lifecycle fields are written only by the booking service.
REGISTRATION_READONLY_FIELDS = [
    "ticket_number",
    "event",
    "attendee",
    "status",
    "checked_in",
    "checked_in_at",
    "registered_at",
]


class RegistrationInline(admin.TabularInline):
    model = Registration
    extra = 0
    fields = ["ticket_number", "attendee", "status", "checked_in"]
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class VolunteerAssignmentInline(admin.TabularInline):
    model = VolunteerAssignment
    extra = 0


class TaskInline(admin.TabularInline):
    model = Task
    extra = 0
    fields = ["title", "volunteer", "status", "due_date"]


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["full_name", "email", "role", "created_at"]
    list_filter = ["role"]
    search_fields = ["full_name", "email"]
    readonly_fields = ["id", "role"]

    def has_add_permission(self, request):
        return False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "organizer", "starts_at", "status", "capacity"]
    list_filter = ["status", "category"]
    search_fields = ["title", "venue"]
    inlines = [VolunteerAssignmentInline, TaskInline, RegistrationInline]

    def get_readonly_fields(self, request, obj=None):
        # Capacity is fixed once the event exists.
        return ["capacity"] if obj is not None else []


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["ticket_number", "event", "attendee", "status", "checked_in"]
    list_filter = ["status", "event"]
    search_fields = ["ticket_number", "attendee__email"]
    readonly_fields = REGISTRATION_READONLY_FIELDS

    def has_add_permission(self, request):
        return False


@admin.register(VolunteerAssignment)
class VolunteerAssignmentAdmin(admin.ModelAdmin):
    list_display = ["volunteer", "event", "assigned_role", "assigned_at"]
    list_filter = ["event"]


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ["title", "event", "volunteer", "status", "due_date"]
    list_filter = ["status", "event"]
