# File: recordlock/apps/lockable/signals.py
"""
# ==============================================================================
# 模块名称: 锁定守卫信号 (Lockable Signals)
# ==============================================================================
#
# [Purpose / 用途]
# 1. 定义软删除生命周期信号 (pre/post_soft_delete, pre/post_restore)。
# 2. 在 save / delete 提交前执行锁定守卫，拒绝时抛出 RecordLocked。
#
# [Architecture / 架构]
# - Trigger: pre_save / pre_delete / pre_soft_delete
# - 挂载方式: App ready 时逐个可锁定模型 connect (sender=Model)
# - 拒绝发生在任何 SQL 之前，数据库状态保持不变
#
# ==============================================================================
"""
import logging

from django.apps import apps
from django.db.models.signals import pre_delete, pre_save
from django.dispatch import Signal

from .conf import get_setting
from .exceptions import RecordLocked, describe_model

logger = logging.getLogger(__name__)

# 软删除生命周期 (sender=Model, instance, using)
pre_soft_delete = Signal()
post_soft_delete = Signal()

# 恢复生命周期 (sender=Model, instance)
pre_restore = Signal()
post_restore = Signal()


def deny_locked(instance, action: str, reason: str):
    """记录日志并抛出 RecordLocked"""
    if get_setting('LOG_DENIALS'):
        logger.warning(
            f"Blocked {action} of locked record {describe_model(instance)} ({instance.pk}) [{reason}]"
        )
    raise RecordLocked(instance)


def guard_save(sender, instance, raw=False, using=None, update_fields=None, **kwargs):
    """保存前守卫"""
    decision = instance.authorize_save(update_fields)
    if not decision:
        deny_locked(instance, 'save', decision.reason)


def guard_delete(sender, instance, using=None, **kwargs):
    """删除前守卫 (硬删除与软删除共用)"""
    decision = instance.authorize_delete()
    if not decision:
        deny_locked(instance, 'delete', decision.reason)


def _dispatch_uid(hook: str, model) -> str:
    return f"lockable.{hook}.{model._meta.label_lower}"


def connect_lockable_models(models=None):
    """
    为每个可锁定的具体模型挂载守卫
    返回已挂载的模型列表
    """
    from .models import LockableMixin

    if models is None:
        models = apps.get_models()

    connected = []
    for model in models:
        if not issubclass(model, LockableMixin) or model._meta.abstract:
            continue
        pre_save.connect(guard_save, sender=model, dispatch_uid=_dispatch_uid('save', model))
        pre_delete.connect(guard_delete, sender=model, dispatch_uid=_dispatch_uid('delete', model))
        pre_soft_delete.connect(guard_delete, sender=model, dispatch_uid=_dispatch_uid('soft_delete', model))
        connected.append(model)

    logger.debug(f"Lock guard connected for {len(connected)} model(s)")
    return connected
