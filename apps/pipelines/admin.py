from django.contrib import admin
from .models import Pipeline, Opportunity, StageChange


@admin.register(Pipeline)
class PipelineAdmin(admin.ModelAdmin):
    list_display = ['name', 'account', 'stage_count', 'created_at']
    list_filter = ['account']
    search_fields = ['name']

    def stage_count(self, obj):
        return len(obj.stages or [])

    stage_count.short_description = 'Stages'


class StageChangeInline(admin.TabularInline):

    model = StageChange
    extra = 0
    readonly_fields = ['from_stage', 'to_stage', 'changed_by', 'changed_at']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Opportunity)
class OpportunityAdmin(admin.ModelAdmin):
    list_display = ['contact', 'pipeline', 'stage', 'opportunity_value', 'next_follow_up_date', 'owner', 'updated_at']
    list_filter = ['pipeline', 'stage', 'owner']
    search_fields = ['contact__name', 'contact__business_name']
    list_select_related = ['contact', 'pipeline', 'owner']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [StageChangeInline]
