# File: recordlock/apps/lockable/apps.py
"""
# ==============================================================================
# 模块名称: 记录锁定应用配置 (Lockable App Config)
# ==============================================================================
#
# [Purpose / 用途]
# App 启动 (Ready 阶段) 时为每个可锁定模型挂载 save / delete 守卫。
#
# [Architecture / 架构]
# - Trigger: Django Startup -> AppRegistry
# - 逐个模型显式 connect (sender=Model)，不注册全局监听器
#
# ==============================================================================
"""
from django.apps import AppConfig


class LockableConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'recordlock.apps.lockable'
    label = 'lockable'
    verbose_name = '记录锁定'

    def ready(self):
        # [关键] 所有模型已加载完毕，此时挂载守卫
        from .signals import connect_lockable_models
        connect_lockable_models()
