# File: recordlock/apps/lockable/querysets.py
"""
查询过滤 - 按锁定状态筛选

    Document.objects.locked()
    Document.objects.filter(owner=user).unlocked()
"""
from django.db import models

from .signals import deny_locked


class LockableQuerySet(models.QuerySet):

    def _lock_filter(self, state: bool):
        return self.filter(**{self.model.get_lock_field(): state})

    def locked(self):
        """仅已锁定记录"""
        return self._lock_filter(True)

    def unlocked(self):
        """仅未锁定记录"""
        return self._lock_filter(False)

    def delete(self):
        # 批量删除前逐条检查已锁定记录，拒绝时尚未开启删除事务
        if self.query.is_sliced or self._fields is not None:
            # 交给 Django 抛出原生错误
            return super().delete()

        for obj in self.locked():
            decision = obj.authorize_delete()
            if not decision:
                deny_locked(obj, 'delete', decision.reason)
        return super().delete()

    delete.alters_data = True
    delete.queryset_only = True


class LockableManager(models.Manager.from_queryset(LockableQuerySet)):
    pass
