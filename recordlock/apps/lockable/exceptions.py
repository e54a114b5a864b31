# File: recordlock/apps/lockable/exceptions.py
"""
# ==============================================================================
# 模块名称: 锁定异常定义 (Lockable Exceptions)
# ==============================================================================
#
# [Purpose / 用途]
# 守卫拒绝 save / delete 时抛出的异常。
#
# [Architecture / 架构]
# - LockableError (Base)
#   - RecordLocked (记录已锁定，423)
#
# ==============================================================================
"""


class LockableError(Exception):
    """锁定模块异常基类"""
    def __init__(self, message: str, code: int = 400, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class RecordLocked(LockableError):
    """记录已锁定，无法修改或删除"""
    def __init__(self, record):
        self.record = record
        label = describe_model(record)
        pk = getattr(record, 'pk', None)
        super().__init__(
            f"{label} is locked and cannot be modified or deleted ({pk})",
            code=423,
            details={'model': label, 'pk': None if pk is None else str(pk)},
        )

    def get_record(self):
        return self.record


def describe_model(record) -> str:
    meta = getattr(record, '_meta', None)
    if meta is not None:
        return meta.label
    return type(record).__name__
