# File: recordlock/apps/lockable/tracking.py
"""
# ==============================================================================
# 模块名称: 脏字段追踪 (Persisted State Tracking)
# ==============================================================================
#
# [Purpose / 用途]
# Django 不记录 "自上次持久化以来改动了哪些字段"。
# 本 Mixin 在加载 / 保存 / 刷新时对字段值拍快照，并与当前值对比得出脏字段集合。
#
# [Architecture / 架构]
# - 快照时机: from_db, save() 之后, refresh_from_db() 之后
# - 延迟加载 (defer/only) 的字段未加载时不参与对比
# - 快照以字段 name 为键 (外键为 author 而非 author_id)
#
# ==============================================================================
"""
import copy
from typing import Dict, Iterable, Optional, Set

from django.db.models.fields.files import FieldFile


def _freeze(value):
    # 文件字段按文件名对比，可变容器深拷贝
    if isinstance(value, FieldFile):
        return value.name
    if isinstance(value, (dict, list, set)):
        return copy.deepcopy(value)
    return value


class PersistedStateMixin:

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance.remember_persisted_state()
        return instance

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        self.remember_persisted_state(kwargs.get('update_fields'))

    def refresh_from_db(self, using=None, fields=None, **kwargs):
        super().refresh_from_db(using=using, fields=fields, **kwargs)
        self.remember_persisted_state(fields)

    @classmethod
    def _resolve_field_names(cls, names: Iterable[str]) -> Set[str]:
        """name / attname 统一为 name"""
        by_attname = {f.attname: f.name for f in cls._meta.concrete_fields}
        return {by_attname.get(name, name) for name in names}

    def remember_persisted_state(self, fields: Optional[Iterable[str]] = None):
        """
        记录当前值为已持久化状态
        fields 为 None 时整体重置，否则只更新指定字段
        """
        if fields is None:
            state = {}
            names = None
        else:
            state = dict(getattr(self, '_persisted_state', {}))
            names = self._resolve_field_names(fields)

        for f in self._meta.concrete_fields:
            if names is not None and f.name not in names:
                continue
            if f.attname not in self.__dict__:
                # 延迟字段
                continue
            state[f.name] = _freeze(self.__dict__[f.attname])

        self._persisted_state = state

    def get_persisted_state(self) -> Dict[str, object]:
        return dict(getattr(self, '_persisted_state', {}))

    def get_dirty_fields(self) -> Set[str]:
        state = getattr(self, '_persisted_state', {})
        dirty = set()
        for f in self._meta.concrete_fields:
            if f.attname not in self.__dict__:
                continue
            if f.name not in state or state[f.name] != _freeze(self.__dict__[f.attname]):
                dirty.add(f.name)
        return dirty

    def is_dirty(self, field_name: Optional[str] = None) -> bool:
        dirty = self.get_dirty_fields()
        if field_name is None:
            return bool(dirty)
        return bool(self._resolve_field_names([field_name]) & dirty)
