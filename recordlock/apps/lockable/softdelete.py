# File: recordlock/apps/lockable/softdelete.py
"""
# ==============================================================================
# 模块名称: 软删除支持 (Soft Delete)
# ==============================================================================
#
# [Purpose / 用途]
# 为模型提供 "标记删除 / 恢复" 能力，使锁定守卫可以区分恢复操作。
#
# [Architecture / 架构]
# - delete():       发送 pre_soft_delete -> UPDATE deleted_at=now -> post_soft_delete
# - restore():      发送 pre_restore -> deleted_at=None -> save() -> post_restore
# - force_delete(): 物理删除 (走 Django 原生 pre_delete)
#
# [Notes / 注意]
# delete() 通过 QuerySet.update 写入，不触发 pre_save，
# 因此软删除只受删除守卫约束。
#
# ==============================================================================
"""
from django.db import models, router
from django.utils import timezone

from .signals import post_restore, post_soft_delete, pre_restore, pre_soft_delete
from .tracking import PersistedStateMixin


class SoftDeleteMixin(PersistedStateMixin):
    deleted_field = 'deleted_at'

    @classmethod
    def get_deleted_field(cls) -> str:
        return cls.deleted_field

    def is_trashed(self) -> bool:
        return getattr(self, self.get_deleted_field()) is not None

    def delete(self, using=None, keep_parents=False):
        if getattr(self, '_force_deleting', False):
            return super().delete(using=using, keep_parents=keep_parents)

        if self.pk is None:
            raise ValueError(
                f"{self._meta.object_name} object can't be deleted because its "
                f"{self._meta.pk.attname} attribute is set to None."
            )
        using = using or router.db_for_write(self.__class__, instance=self)
        field_name = self.get_deleted_field()

        pre_soft_delete.send(sender=self.__class__, instance=self, using=using)

        now = timezone.now()
        self.__class__._base_manager.using(using).filter(pk=self.pk).update(**{field_name: now})
        setattr(self, field_name, now)
        self.remember_persisted_state([field_name])

        post_soft_delete.send(sender=self.__class__, instance=self, using=using)
        return 1, {self._meta.label: 1}

    def force_delete(self, using=None, keep_parents=False):
        self._force_deleting = True
        try:
            return self.delete(using=using, keep_parents=keep_parents)
        finally:
            self._force_deleting = False

    def restore(self):
        pre_restore.send(sender=self.__class__, instance=self)
        setattr(self, self.get_deleted_field(), None)
        self.save()
        post_restore.send(sender=self.__class__, instance=self)
        return self


class SoftDeleteModel(SoftDeleteMixin, models.Model):
    deleted_at = models.DateTimeField('删除时间', null=True, blank=True, db_index=True)

    class Meta:
        abstract = True
