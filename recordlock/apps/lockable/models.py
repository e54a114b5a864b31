# File: recordlock/apps/lockable/models.py
"""
# ==============================================================================
# 模块名称: 可锁定模型 (Lockable Models)
# ==============================================================================
#
# [Purpose / 用途]
# 为业务模型提供 "锁定" 能力: 锁定后的记录拒绝修改与删除，
# 除非本次写入是锁标记切换、仅改动豁免字段，或策略允许。
#
# [Architecture / 架构]
# - LockableMixin:  能力方法 (状态读取、策略判定、加锁/解锁、作用域执行)
# - LockableModel:  抽象模型，自带 locked 字段与 LockableManager
# - 策略:           类属性 lock_policy = LockPolicy(...)
# - 守卫挂载:       signals.connect_lockable_models (App ready 阶段)
#
# [Usage / 用法]
#     class Invoice(LockableModel):
#         lock_policy = LockPolicy(exceptions={'note'})
#
#     invoice.mark_locked()
#     invoice.while_unlocked(lambda inv: inv.recalculate())
#
# ==============================================================================
"""
import logging
from contextlib import contextmanager

from django.db import models

from . import guard
from .guard import LockPolicy
from .querysets import LockableManager
from .signals import deny_locked
from .softdelete import SoftDeleteMixin
from .tracking import PersistedStateMixin

logger = logging.getLogger(__name__)


class LockableMixin(PersistedStateMixin):
    lock_policy = LockPolicy()

    # -------------------------------------------------------------------------
    # 配置
    # -------------------------------------------------------------------------
    @classmethod
    def get_lock_field(cls) -> str:
        return cls.lock_policy.field

    @classmethod
    def get_lock_exceptions(cls) -> frozenset:
        return frozenset(cls._resolve_field_names(cls.lock_policy.exceptions))

    # -------------------------------------------------------------------------
    # 状态
    # -------------------------------------------------------------------------
    def is_locked(self) -> bool:
        return bool(getattr(self, self.get_lock_field()))

    def is_unlocked(self) -> bool:
        return not self.is_locked()

    def is_locking(self) -> bool:
        """本次写入正在加锁"""
        return self.is_dirty(self.get_lock_field()) and self.is_locked()

    def is_unlocking(self) -> bool:
        """本次写入正在解锁"""
        return self.is_dirty(self.get_lock_field()) and not self.is_locked()

    def is_soft_deletable(self) -> bool:
        return isinstance(self, SoftDeleteMixin)

    def _pending_dirty_fields(self, update_fields=None) -> set:
        dirty = self.get_dirty_fields()
        if update_fields is not None:
            # 部分保存只写入 update_fields
            dirty &= self._resolve_field_names(update_fields)
        return dirty

    def _is_locked_for_write(self, update_fields=None) -> bool:
        """本次写入所面对的锁状态"""
        lock_field = self.get_lock_field()
        if update_fields is not None and lock_field not in self._resolve_field_names(update_fields):
            # 锁标记不在写入范围内，以已持久化的值为准
            persisted = self.get_persisted_state()
            if lock_field in persisted:
                return bool(persisted[lock_field])
        return self.is_locked()

    def _is_transitioning_lock(self, update_fields=None) -> bool:
        return self.get_lock_field() in self._pending_dirty_fields(update_fields)

    def is_restoring_while_locked(self, update_fields=None) -> bool:
        """已锁定记录的纯恢复: 唯一脏字段是被清空的删除标记"""
        if not (self._is_locked_for_write(update_fields) and self.is_soft_deletable()):
            return False
        deleted_field = self.get_deleted_field()
        return (
            self._pending_dirty_fields(update_fields) == {deleted_field}
            and getattr(self, deleted_field) is None
        )

    # -------------------------------------------------------------------------
    # 策略
    # -------------------------------------------------------------------------
    def can_delete_when_locked(self) -> bool:
        return bool(self.lock_policy.can_delete_when_locked(self))

    def can_restore_while_locked(self) -> bool:
        predicate = self.lock_policy.can_restore_while_locked
        if predicate is None:
            return self.can_delete_when_locked()
        return bool(predicate(self))

    def can_save_while_locked(self, update_fields=None) -> bool:
        predicate = self.lock_policy.can_save_while_locked
        if predicate is not None:
            return bool(predicate(self))
        return self._composite_save_decision(update_fields).allowed

    def _composite_save_decision(self, update_fields=None) -> guard.Decision:
        return guard.authorize_save(
            self,
            self._pending_dirty_fields(update_fields),
            self.get_lock_exceptions(),
            exists=not self._state.adding,
            is_locked=self._is_locked_for_write(update_fields),
            is_transitioning_lock=self._is_transitioning_lock(update_fields),
            is_restoring=self.is_restoring_while_locked(update_fields),
            can_restore_while_locked=lambda record: record.can_restore_while_locked(),
        )

    def authorize_save(self, update_fields=None) -> guard.Decision:
        """pre_save 守卫入口"""
        if self._state.adding:
            return guard.Decision.permit(guard.Reason.NEW_RECORD)
        if not self._is_locked_for_write(update_fields):
            return guard.Decision.permit(guard.Reason.UNLOCKED)
        if self.lock_policy.can_save_while_locked is not None:
            if self.can_save_while_locked(update_fields):
                return guard.Decision.permit(guard.Reason.SAVE_POLICY)
            return guard.Decision.deny()
        return self._composite_save_decision(update_fields)

    def authorize_delete(self) -> guard.Decision:
        """pre_delete / pre_soft_delete 守卫入口"""
        return guard.authorize_delete(
            self,
            is_locked=self.is_locked(),
            can_delete_when_locked=lambda record: record.can_delete_when_locked(),
        )

    def delete(self, *args, **kwargs):
        # [关键] Collector 在 atomic(savepoint=False) 内发送 pre_delete，
        # 在此提前拒绝，避免外层事务被标记回滚
        decision = self.authorize_delete()
        if not decision:
            deny_locked(self, 'delete', decision.reason)
        return super().delete(*args, **kwargs)

    # -------------------------------------------------------------------------
    # 加锁 / 解锁
    # -------------------------------------------------------------------------
    def set_locked(self, state: bool = True):
        """仅修改内存中的锁标记，不保存"""
        setattr(self, self.get_lock_field(), state)
        return self

    def set_unlocked(self):
        return self.set_locked(False)

    def mark_locked(self):
        """加锁并立即保存"""
        self.set_locked(True).save()
        logger.debug(f"Locked {self._meta.label} ({self.pk})")
        return self

    def mark_unlocked(self):
        """解锁并立即保存"""
        self.set_unlocked().save()
        logger.debug(f"Unlocked {self._meta.label} ({self.pk})")
        return self

    # -------------------------------------------------------------------------
    # 作用域执行
    # -------------------------------------------------------------------------
    def _compensate(self, step):
        # 原始异常优先，补偿写入失败只记录日志
        try:
            step()
        except Exception:
            logger.exception(f"Compensating lock write failed for {self._meta.label} ({self.pk})")

    @contextmanager
    def lock_scope(self):
        """
        with invoice.lock_scope():
            ...
        进入时加锁，退出 (含异常) 时解锁
        """
        self.mark_locked()
        try:
            yield self
        except BaseException:
            self._compensate(self.mark_unlocked)
            raise
        self.mark_unlocked()

    @contextmanager
    def unlock_scope(self):
        """进入时解锁，退出 (含异常) 时重新加锁"""
        self.mark_unlocked()
        try:
            yield self
        except BaseException:
            self._compensate(self.mark_locked)
            raise
        self.mark_locked()

    def while_locked(self, action):
        with self.lock_scope():
            action(self)
        return self

    def while_unlocked(self, action):
        with self.unlock_scope():
            action(self)
        return self


class LockableModel(LockableMixin, models.Model):
    locked = models.BooleanField('已锁定', default=False, db_index=True)

    objects = LockableManager()

    class Meta:
        abstract = True
