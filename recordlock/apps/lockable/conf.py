# File: recordlock/apps/lockable/conf.py
"""
配置读取 - settings.LOCKABLE 覆盖默认值

    LOCKABLE = {
        'LOG_DENIALS': True,
        'DENIED_HTTP_STATUS': 423,
        'ADMIN_ACTIONS': True,
    }
"""
from django.conf import settings

DEFAULTS = {
    'LOG_DENIALS': True,
    'DENIED_HTTP_STATUS': 423,
    'ADMIN_ACTIONS': True,
}


def get_setting(name: str):
    if name not in DEFAULTS:
        raise KeyError(f"Unknown LOCKABLE setting: {name}")
    user_settings = getattr(settings, 'LOCKABLE', None) or {}
    return user_settings.get(name, DEFAULTS[name])
