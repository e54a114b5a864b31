# File: recordlock/apps/lockable/__init__.py
"""
记录锁定 App (Lockable Records)
- guard: 纯规则引擎 (save / delete 判定)
- models: LockableMixin / LockableModel
- softdelete: 软删除 + 恢复
- signals: pre_save / pre_delete 守卫
"""
__version__ = '1.0.0'
