# File: recordlock/apps/lockable/guard.py
"""
# ==============================================================================
# 模块名称: 锁定守卫规则引擎 (Lock Guard)
# ==============================================================================
#
# [Purpose / 用途]
# 判定一次待提交的 save / delete 是否被允许。
# 本模块不依赖 Django，只接收记录的状态快照 (锁标记、脏字段集合) 与策略回调。
#
# [Architecture / 架构]
# - LockPolicy: 每个模型类型一份的策略配置 (锁字段、豁免字段、三个判定函数)
# - Decision:   判定结果 (allowed + reason)，不抛异常
# - authorize_save / authorize_delete: 纯函数
#
# 抛出 RecordLocked 是宿主层 (signals.py) 的责任。
#
# ==============================================================================
"""
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, Iterable, Optional

DEFAULT_LOCK_FIELD = 'locked'


def always(record) -> bool:
    return True


def never(record) -> bool:
    return False


@dataclass(frozen=True)
class LockPolicy:
    """
    单个模型类型的锁定策略

    can_restore_while_locked 为 None 时沿用删除策略；
    can_save_while_locked 为 None 时使用组合规则 (见 authorize_save)。
    """
    field: str = DEFAULT_LOCK_FIELD
    exceptions: FrozenSet[str] = frozenset()
    can_delete_when_locked: Callable[[Any], bool] = never
    can_restore_while_locked: Optional[Callable[[Any], bool]] = None
    can_save_while_locked: Optional[Callable[[Any], bool]] = None

    def __post_init__(self):
        # 允许传入 list / tuple
        object.__setattr__(self, 'exceptions', frozenset(self.exceptions))


class Reason:
    NEW_RECORD = 'new-record'
    UNLOCKED = 'unlocked'
    EXCEPTIONS_ONLY = 'exceptions-only'
    LOCK_TRANSITION = 'lock-transition'
    RESTORE = 'restore-while-locked'
    DELETE_POLICY = 'delete-policy'
    SAVE_POLICY = 'save-policy'
    LOCKED = 'locked'


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str

    def __bool__(self):
        return self.allowed

    @classmethod
    def permit(cls, reason: str) -> 'Decision':
        return cls(True, reason)

    @classmethod
    def deny(cls, reason: str = Reason.LOCKED) -> 'Decision':
        return cls(False, reason)


def effective_dirty(dirty: Iterable[str], exceptions: Iterable[str]) -> FrozenSet[str]:
    """脏字段 - 豁免字段"""
    return frozenset(dirty) - frozenset(exceptions)


def authorize_save(
    record,
    dirty: Iterable[str],
    exceptions: Iterable[str],
    *,
    exists: bool,
    is_locked: bool,
    is_transitioning_lock: bool,
    is_restoring: bool,
    can_restore_while_locked: Callable[[Any], bool],
) -> Decision:
    """
    判定一次 save 是否允许

    仅对 "已存在 + 已锁定" 的记录生效，依次检查:
    1. 去除豁免字段后无脏字段
    2. 本次写入是锁标记本身的切换 (加锁 / 解锁)
    3. 纯恢复 (仅清除软删除标记) 且策略允许锁定时恢复
    """
    if not exists:
        return Decision.permit(Reason.NEW_RECORD)
    if not is_locked:
        return Decision.permit(Reason.UNLOCKED)

    if not effective_dirty(dirty, exceptions):
        return Decision.permit(Reason.EXCEPTIONS_ONLY)

    if is_transitioning_lock:
        return Decision.permit(Reason.LOCK_TRANSITION)

    # 回调仅在前面规则都不满足时才调用
    if is_restoring and can_restore_while_locked(record):
        return Decision.permit(Reason.RESTORE)

    return Decision.deny()


def authorize_delete(record, *, is_locked: bool, can_delete_when_locked: Callable[[Any], bool]) -> Decision:
    """硬删除与软删除共用同一判定"""
    if not is_locked:
        return Decision.permit(Reason.UNLOCKED)
    if can_delete_when_locked(record):
        return Decision.permit(Reason.DELETE_POLICY)
    return Decision.deny()
