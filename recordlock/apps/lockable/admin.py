# File: recordlock/apps/lockable/admin.py
"""
# ==============================================================================
# 模块名称: 可锁定模型后台 (Lockable Admin)
# ==============================================================================
#
# [Purpose / 用途]
# 让 Django Admin 感知锁定状态:
# - 批量加锁 / 解锁动作
# - 锁定记录的非豁免字段只读
# - 策略禁止时隐藏删除
#
# [Usage / 用法]
#     @admin.register(Invoice)
#     class InvoiceAdmin(LockableAdminMixin, admin.ModelAdmin):
#         list_display = ('number', 'locked')
#
# ==============================================================================
"""
from django.contrib import admin, messages
from django.contrib.admin.options import IS_POPUP_VAR

from .conf import get_setting


class LockableAdminMixin:

    def get_actions(self, request):
        actions = super().get_actions(request)
        if self.actions is None or IS_POPUP_VAR in request.GET or not get_setting('ADMIN_ACTIONS'):
            return actions

        # 需要 change 权限
        lock_actions = [self.get_action(name) for name in ('lock_selected', 'unlock_selected')]
        for func, name, description in self._filter_actions_by_permissions(request, lock_actions):
            actions[name] = (func, name, description)
        return actions

    def get_list_filter(self, request):
        list_filter = list(super().get_list_filter(request))
        lock_field = self.model.get_lock_field()
        if lock_field not in list_filter:
            list_filter.append(lock_field)
        return list_filter

    def get_readonly_fields(self, request, obj=None):
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is None or obj.is_unlocked():
            return readonly

        # 锁定状态下仅锁字段与豁免字段可编辑
        editable = set(obj.get_lock_exceptions()) | {obj.get_lock_field()}
        for f in obj._meta.concrete_fields:
            if f.primary_key or not f.editable:
                continue
            if f.name not in editable and f.name not in readonly:
                readonly.append(f.name)
        return readonly

    def has_delete_permission(self, request, obj=None):
        if obj is not None and not obj.authorize_delete():
            return False
        return super().has_delete_permission(request, obj)

    @admin.action(permissions=['change'], description='锁定所选记录')
    def lock_selected(self, request, queryset):
        count = 0
        for obj in queryset:
            obj.mark_locked()
            count += 1
        self.message_user(request, f"已锁定 {count} 条记录", messages.SUCCESS)

    @admin.action(permissions=['change'], description='解锁所选记录')
    def unlock_selected(self, request, queryset):
        count = 0
        for obj in queryset:
            obj.mark_unlocked()
            count += 1
        self.message_user(request, f"已解锁 {count} 条记录", messages.SUCCESS)
